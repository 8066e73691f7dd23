"""
The sync engine is the single writer of the shared board.

It holds the authoritative BoardState and its current fingerprint.
Every mutation runs the same sequence inside one critical section:
    1. compare the fingerprint the client claims with the authoritative one
    2. check the request against the board (and the injected legality check)
    3. mutate the board
    4. recompute the fingerprint
Readers only ever receive freshly serialized snapshots or deltas, never the live board.
"""

import logging
from threading import RLock
from typing import Callable, Optional

from src.chess.board import BoardState, dump_snapshot
from src.chess.fingerprint import fingerprint
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.exceptions import IllegalMoveError, NoPieceAtSourceError
from src.core.models import OwnerId, StateSnapshot
from src.core.shared_types import PieceType, RejectionReason
from src.sync.outcomes import (
    Applied,
    Desynced,
    Ignored,
    MoveDelta,
    MoveOutcome,
    PromoteOutcome,
    Rejected,
)

logger = logging.getLogger(__name__)

# (board, move, requester) -> is the move allowed? Called before any mutation.
LegalityCheck = Callable[[BoardState, Move, OwnerId], bool]


def always_legal(board: BoardState, move: Move, requester: OwnerId) -> bool:
    """Default policy: any structurally valid move is applied."""
    return True


class SyncEngine:
    """Authoritative board + fingerprint, with the apply/resync protocol on top."""

    def __init__(
        self,
        state: Optional[BoardState] = None,
        legality_check: LegalityCheck = always_legal,
    ) -> None:
        self._state = state if state is not None else BoardState.default()
        self._fingerprint = fingerprint(self._state)
        self._legality_check = legality_check
        self._lock = RLock()

    @property
    def fingerprint(self) -> int:
        with self._lock:
            return self._fingerprint

    @property
    def legality_check(self) -> LegalityCheck:
        return self._legality_check

    # --- Read side ---
    def snapshot(self) -> StateSnapshot:
        """Full resync payload (initial connect, detected desync, explicit request)."""
        with self._lock:
            return self._snapshot()

    def dump_snapshot(self) -> str:
        with self._lock:
            return dump_snapshot(self._state)

    # --- Write side ---
    def apply_move(
        self, move: Move, claimed_fingerprint: int, requester: OwnerId
    ) -> MoveOutcome:
        """
        Apply a move if the requester's view of the board is up to date.
        ----

        * stale fingerprint -> Desynced(full state), nothing changes
        * no living piece at the source / refused by the legality check -> Rejected, nothing changes
        * otherwise: relocate the piece, capture whatever lived on the target, bump the move counter
        """
        with self._lock:
            if claimed_fingerprint != self._fingerprint:
                logger.info(
                    "Desync for owner=%s (claimed=%s, current=%s), resending state",
                    requester,
                    claimed_fingerprint,
                    self._fingerprint,
                )
                return Desynced(self._snapshot())

            try:
                mover = self._resolve_mover(move, requester)
            except NoPieceAtSourceError as e:
                logger.warning("Rejected move from owner=%s: %s", requester, e)
                return Rejected(RejectionReason.NO_PIECE_AT_SOURCE, self._fingerprint)
            except IllegalMoveError as e:
                logger.warning("Rejected move from owner=%s: %s", requester, e)
                return Rejected(RejectionReason.ILLEGAL_MOVE, self._fingerprint)

            fingerprint_before = self._fingerprint
            self._relocate(mover, move.target)
            self._state.move_count += 1
            self._refresh_fingerprint()
            logger.info(
                "%s - %s (sum %s -> %s)",
                requester,
                move,
                fingerprint_before,
                self._fingerprint,
            )
            return Applied(MoveDelta(move, self._fingerprint))

    def promote(
        self, square: Square, new_type: PieceType, requester: OwnerId
    ) -> PromoteOutcome:
        """Change the type of the requester's own living piece in place. Anything else is Ignored."""
        with self._lock:
            piece = self._state.piece_at(square)
            if piece is None or piece.owner != requester:
                logger.debug(
                    "Ignored promotion at %s to %s by owner=%s", square, new_type, requester
                )
                return Ignored()

            piece.promote_to(new_type)
            self._refresh_fingerprint()
            logger.info("Promoted %s to type %s", square, new_type)
            return Applied(self._snapshot())

    def create_pieces_for(self, owner: OwnerId) -> StateSnapshot:
        """Allocate the starter set of a newly registered owner."""
        with self._lock:
            created = self._state.create_pieces_for(owner)
            self._refresh_fingerprint()
            logger.info("Created %d pieces for owner=%s", len(created), owner)
            return self._snapshot()

    # --- Internal helpers (caller holds the lock) ---
    def _resolve_mover(self, move: Move, requester: OwnerId) -> Piece:
        mover = self._state.piece_at(move.source)
        if mover is None:
            raise NoPieceAtSourceError(f"No piece at {move.source}")
        if not self._legality_check(self._state, move, requester):
            raise IllegalMoveError(f"Move not allowed: {move}")
        return mover

    def _relocate(self, mover: Piece, target: Square) -> None:
        occupant = self._state.piece_at(target)
        if occupant is not None and occupant is not mover:
            occupant.capture()
        mover.move_to(target)

    def _refresh_fingerprint(self) -> None:
        self._fingerprint = fingerprint(self._state)

    def _snapshot(self) -> StateSnapshot:
        return StateSnapshot(state=self._state.serialize(), fingerprint=self._fingerprint)
