"""Protocol repository (implemented with SQLAlchemy, or mocked in tests)"""

from typing import Protocol


class SnapshotRepository(Protocol):
    """Persistence of the serialized board"""

    def load_snapshot(self) -> str | None:
        """Last saved snapshot, if any was ever saved."""
        ...

    def save_snapshot(self, blob: str) -> None:
        """Store the snapshot, replacing the previous one."""
        ...
