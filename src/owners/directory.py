"""
Owner directory: maps a session token to an owner id, and an owner id to its metadata.

The sync engine only consumes it to attribute moves. It never writes to it.
"""

import logging
from typing import Optional, Protocol
from uuid import uuid4

from src.core.exceptions import InvalidRequestError
from src.core.models import OwnerId, OwnerModel, Registration, SessionToken
from src.core.shared_types import OwnerColor

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 15


def validate_username(username: str) -> str:
    if not (USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH):
        raise InvalidRequestError(
            f"Username must be {USERNAME_MIN_LENGTH} to {USERNAME_MAX_LENGTH} characters long, got {len(username)}."
        )
    return username


def validate_color(color: str) -> OwnerColor:
    try:
        return OwnerColor(color)
    except ValueError as e:
        raise InvalidRequestError(
            f"Color {color!r} not in {','.join(c.value for c in OwnerColor)}."
        ) from e


class OwnerDirectory(Protocol):
    """Identity collaborator of the sync core."""

    def register(self, username: str, color: str) -> Registration:
        """Validate, then store a new owner and a session token pointing to it."""
        ...

    def resolve(self, session: SessionToken) -> Optional[OwnerId]:
        """Owner id behind a session token, if the session exists."""
        ...

    def get(self, owner: OwnerId) -> Optional[OwnerModel]:
        """Metadata of an owner, if registered."""
        ...

    def owners(self) -> dict[OwnerId, OwnerModel]:
        """All registered owners."""
        ...


class InMemoryOwnerDirectory:
    """Directory kept in plain dictionaries (lost on restart)."""

    def __init__(self) -> None:
        self._sessions: dict[SessionToken, OwnerId] = {}
        self._owners: dict[OwnerId, OwnerModel] = {}

    def register(self, username: str, color: str) -> Registration:
        owner_color = validate_color(color)
        validate_username(username)

        owner_id = str(uuid4())
        session = str(uuid4())
        self._owners[owner_id] = OwnerModel(username=username, color=owner_color.value)
        self._sessions[session] = owner_id
        logger.info("Registered owner=%s (username=%s, color=%s)", owner_id, username, owner_color)
        return Registration(session=session, owner=owner_id)

    def resolve(self, session: SessionToken) -> Optional[OwnerId]:
        return self._sessions.get(session)

    def get(self, owner: OwnerId) -> Optional[OwnerModel]:
        return self._owners.get(owner)

    def owners(self) -> dict[OwnerId, OwnerModel]:
        return dict(self._owners)
