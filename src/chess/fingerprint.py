"""
Fingerprint (checksum) of a board state.

The fingerprint is the only mechanism used to detect that a client's view of the board is stale,
so it must depend on the logical field values only:
* never on the order of the piece collection (pieces are summed, and addition commutes)
* never on the process it runs in (no builtin `hash`, which is salted per interpreter for strings)

It is an optimistic-concurrency token, not an integrity guarantee.
"""

from hashlib import blake2b
from typing import Iterable, Protocol

from src.chess.pieces import Piece

# Clients compare fingerprints as JSON numbers: keep them within the exactly representable integer range of a double.
FINGERPRINT_BITS = 53
FINGERPRINT_MASK = (1 << FINGERPRINT_BITS) - 1

_MASK64 = 0xFFFFFFFFFFFFFFFF


class FingerprintedState(Protocol):
    """Just the parts of a board the fingerprint needs"""

    pieces: list[Piece]
    move_count: int


def _mix64(value: int) -> int:
    """SplitMix64 finalizer: spreads small differences in input over all 64 bits."""
    value = (value + 0x9E3779B97F4A7C15) & _MASK64
    value ^= value >> 30
    value = (value * 0xBF58476D1CE4E5B9) & _MASK64
    value ^= value >> 27
    value = (value * 0x94D049BB133111EB) & _MASK64
    value ^= value >> 31
    return value


def piece_digest(piece: Piece) -> int:
    """Deterministic 64-bit digest of every attribute of a single piece."""
    key = f"{piece.x}|{piece.y}|{piece.owner or ''}|{piece.type}|{int(piece.alive)}"
    raw = int.from_bytes(blake2b(key.encode("utf-8"), digest_size=8).digest(), "big")
    return _mix64(raw)


def combine(digests: Iterable[int], move_count: int) -> int:
    total = _mix64(move_count & _MASK64)
    for digest in digests:
        total = (total + digest) & _MASK64
    return total & FINGERPRINT_MASK


def fingerprint(state: FingerprintedState) -> int:
    """Pure function of the pieces (as a multiset) and the move counter."""
    return combine((piece_digest(piece) for piece in state.pieces), state.move_count)
