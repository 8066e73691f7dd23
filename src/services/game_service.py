"""Orchestration of communication from the transport layer to the sync engine, the owner directory, and persistence."""

import logging
from typing import Optional, Protocol

from pydantic import BaseModel

from src.api.models import (
    MeResponse,
    MoveEvent,
    MovePayload,
    MoveRejectedEvent,
    MoveRequest,
    OwnerResponse,
    PromoteRequest,
    RegisterOwnerRequest,
    RegisterOwnerResponse,
    StateEvent,
)
from src.chess.board import BoardState, load_snapshot
from src.core.exceptions import SerializationError
from src.core.models import OwnerId, SessionToken, StateSnapshot
from src.db.repository import SnapshotRepository
from src.owners.directory import OwnerDirectory
from src.sync.engine import LegalityCheck, SyncEngine, always_legal
from src.sync.outcomes import (
    Applied,
    Desynced,
    MoveOutcome,
    PromoteOutcome,
    Rejected,
)

logger = logging.getLogger(__name__)

# Event names pushed to viewers
STATE_EVENT = "state"
MOVE_EVENT = "move"
MOVE_REJECTED_EVENT = "move_rejected"
ERROR_EVENT = "error"


class Viewer(Protocol):
    """A single connected client."""

    def send(self, event: str, payload: Optional[BaseModel]) -> None: ...


class Broadcaster(Protocol):
    """Fans out an event to every connected viewer. Fire-and-forget: no retry, no delivery confirmation."""

    def emit(self, event: str, payload: Optional[BaseModel]) -> None: ...


class GameService:
    """Orchestration of layers for the shared board."""

    def __init__(
        self,
        directory: OwnerDirectory,
        repository: SnapshotRepository,
        broadcaster: Broadcaster,
        engine: Optional[SyncEngine] = None,
        legality_check: LegalityCheck = always_legal,
    ) -> None:
        self.directory = directory
        self.repo = repository
        self.broadcaster = broadcaster
        if engine is not None and legality_check is not always_legal:
            raise ValueError("Pass the legality check either to the engine or to the service, not both")
        self.engine = engine if engine is not None else SyncEngine(legality_check=legality_check)

    # -- Persistence --
    def load_game(self) -> None:
        """Replace the engine with the persisted board. A missing or malformed snapshot falls back to the default layout."""
        blob = self.repo.load_snapshot()
        if blob is None:
            logger.info("No saved game found, starting from the default layout")
            state = BoardState.default()
        else:
            try:
                state = load_snapshot(blob)
            except SerializationError as e:
                logger.warning("Saved game is unreadable, starting from the default layout: %s", e)
                state = BoardState.default()
        # the reloaded engine keeps the policy of the one it replaces
        self.engine = SyncEngine(state, self.engine.legality_check)
        logger.info("Game loaded (sum=%s)", self.engine.fingerprint)

    def save_game(self) -> None:
        self.repo.save_snapshot(self.engine.dump_snapshot())
        logger.info("Game saved (sum=%s)", self.engine.fingerprint)

    # -- Registration / sessions --
    def register_owner(self, request: RegisterOwnerRequest) -> RegisterOwnerResponse:
        """A new participant joins: create the owner, hand out its starter set, and tell everybody."""
        registration = self.directory.register(request.username, request.color)
        snapshot = self.engine.create_pieces_for(registration.owner)
        self.broadcaster.emit(STATE_EVENT, self._state_event(snapshot))
        return RegisterOwnerResponse(
            success=True, session=registration.session, owner=registration.owner
        )

    def me(self, session: SessionToken) -> MeResponse:
        owner = self.directory.resolve(session)
        owner_model = self.directory.get(owner) if owner else None
        if owner_model is None:
            return MeResponse(exists=False, owner=None)
        return MeResponse(
            exists=True,
            owner=OwnerResponse(username=owner_model.username, color=owner_model.color),
        )

    # -- Viewer events --
    def connect(self, session: SessionToken, viewer: Viewer) -> Optional[OwnerId]:
        """
        A viewer opens a connection.
        ----
        Unknown session: the viewer gets an error event (the transport is expected to drop the connection).
        Known session: the viewer gets the full state, which is its starting point for fingerprints.
        """
        owner = self.directory.resolve(session)
        if owner is None:
            logger.warning("Connection refused: unknown session")
            viewer.send(ERROR_EVENT, None)
            return None

        owner_model = self.directory.get(owner)
        logger.info(
            "Connected owner=%s (username=%s, color=%s)",
            owner,
            owner_model.username if owner_model else None,
            owner_model.color if owner_model else None,
        )
        viewer.send(STATE_EVENT, self._state_event(self.engine.snapshot(), owner))
        return owner

    def handle_move(self, owner: OwnerId, request: MoveRequest, viewer: Viewer) -> MoveOutcome:
        """
        Applied: the delta goes to every viewer (the requester included).
        Desynced: the full state goes to the requester only.
        Rejected: the reason goes to the requester only.
        """
        outcome = self.engine.apply_move(request.move.to_move(), request.sum, owner)

        if isinstance(outcome, Applied):
            delta = outcome.payload
            self.broadcaster.emit(
                MOVE_EVENT,
                MoveEvent(move=MovePayload.from_move(delta.move), sum=delta.fingerprint),
            )
        elif isinstance(outcome, Desynced):
            viewer.send(STATE_EVENT, self._state_event(outcome.snapshot, owner))
        elif isinstance(outcome, Rejected):
            viewer.send(
                MOVE_REJECTED_EVENT,
                MoveRejectedEvent(reason=outcome.reason, sum=outcome.fingerprint),
            )
        return outcome

    def handle_promote(self, owner: OwnerId, request: PromoteRequest) -> PromoteOutcome:
        """Applied promotions are broadcast as a full state. Ignored ones send nothing."""
        outcome = self.engine.promote(request.square, request.type, owner)
        if isinstance(outcome, Applied):
            self.broadcaster.emit(STATE_EVENT, self._state_event(outcome.payload))
        return outcome

    def handle_state_request(self, owner: OwnerId, viewer: Viewer) -> None:
        viewer.send(STATE_EVENT, self._state_event(self.engine.snapshot(), owner))

    # -- Internal helpers --
    def _owners(self) -> dict[OwnerId, OwnerResponse]:
        return {
            owner_id: OwnerResponse(username=model.username, color=model.color)
            for owner_id, model in self.directory.owners().items()
        }

    def _state_event(self, snapshot: StateSnapshot, owner: Optional[OwnerId] = None) -> StateEvent:
        return StateEvent.from_snapshot(snapshot, self._owners(), owner)
