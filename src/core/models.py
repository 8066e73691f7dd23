"""
Boundary layer data model(s).

These objects travel between the sync engine, the service, and the persistence layer.
None of them hold a live reference into the board: every instance is built from a fresh serialization.
"""

from dataclasses import dataclass
from typing import Any

# Type aliases to make the models easier to read
OwnerId = str
SessionToken = str


@dataclass(frozen=True)
class StateSnapshot:
    """Full resync payload: the serialized board plus its fingerprint."""

    state: dict[str, Any]
    fingerprint: int


@dataclass
class OwnerModel:
    """Metadata of a registered owner."""

    username: str
    color: str


@dataclass(frozen=True)
class Registration:
    """Result of registering a new owner."""

    session: SessionToken
    owner: OwnerId
