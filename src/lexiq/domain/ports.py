"""
Ports (interfaces) for snapshot persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from lexiq.domain.mastery.models import MasteryState


class SnapshotRepository(ABC):
    """
    Port for loading and saving MasteryState snapshots keyed by (user, object).

    Implementations:
        - InMemorySnapshotRepository: Dict-backed, for tests and embedding.
        - JsonSnapshotRepository: One JSON document per user on disk.
    """

    @abstractmethod
    def get(self, user_id: str, object_id: str) -> MasteryState | None:
        """
        Fetch the snapshot for one object.

        Returns:
            The stored MasteryState, or None if the object was never seen.
        """
        pass

    @abstractmethod
    def save(self, user_id: str, object_id: str, state: MasteryState) -> None:
        """
        Replace the stored snapshot for one object. Writes are all-or-nothing.
        """
        pass

    @abstractmethod
    def load_user(self, user_id: str) -> dict[str, MasteryState]:
        """
        Fetch every snapshot belonging to a user.

        Returns:
            Mapping of object ID to MasteryState; empty for an unknown user.
        """
        pass
