"""Unit tests for /src/owners/directory.py"""

from uuid import UUID

import pytest

from src.core.exceptions import InvalidRequestError
from src.core.models import OwnerModel
from src.core.shared_types import OwnerColor
from src.owners.directory import (
    InMemoryOwnerDirectory,
    validate_color,
    validate_username,
)


# --- VALIDATION ---
@pytest.mark.parametrize("username", ["abcd", "a" * 15, "Mock McMock"])
def test_valid_usernames(username: str) -> None:
    assert validate_username(username) == username


@pytest.mark.parametrize("username", ["", "abc", "a" * 16])
def test_invalid_usernames(username: str) -> None:
    with pytest.raises(InvalidRequestError):
        validate_username(username)


@pytest.mark.parametrize("color", [c.value for c in OwnerColor])
def test_valid_colors(color: str) -> None:
    assert validate_color(color) == OwnerColor(color)


@pytest.mark.parametrize("color", ["", "RED", "white", "#ff0000"])
def test_invalid_colors(color: str) -> None:
    with pytest.raises(InvalidRequestError):
        validate_color(color)


# --- IN MEMORY DIRECTORY ---
def test_register_and_resolve() -> None:
    directory = InMemoryOwnerDirectory()
    registration = directory.register("Mocker", "blue")

    # both are uuid4 strings
    UUID(registration.session)
    UUID(registration.owner)
    assert registration.session != registration.owner

    assert directory.resolve(registration.session) == registration.owner
    assert directory.get(registration.owner) == OwnerModel(username="Mocker", color="blue")
    assert directory.owners() == {registration.owner: OwnerModel("Mocker", "blue")}


def test_unknown_session_and_owner() -> None:
    directory = InMemoryOwnerDirectory()
    registration = directory.register("Mocker", "blue")
    assert directory.resolve("not a session") is None
    assert directory.resolve(registration.owner) is None
    assert directory.get("not an owner") is None


def test_every_registration_is_a_new_owner() -> None:
    directory = InMemoryOwnerDirectory()
    first = directory.register("Mocker", "blue")
    second = directory.register("Mocker", "blue")
    assert first.owner != second.owner
    assert len(directory.owners()) == 2


@pytest.mark.parametrize("username, color", [("abc", "blue"), ("Mocker", "white")])
def test_invalid_registration_stores_nothing(username: str, color: str) -> None:
    directory = InMemoryOwnerDirectory()
    with pytest.raises(InvalidRequestError):
        directory.register(username, color)
    assert directory.owners() == {}


def test_owners_returns_a_copy() -> None:
    directory = InMemoryOwnerDirectory()
    directory.register("Mocker", "blue")
    directory.owners().clear()
    assert len(directory.owners()) == 1
