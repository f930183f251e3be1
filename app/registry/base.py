from abc import ABC, abstractmethod

from app.registry.models import CandidateDocument


class BaseCandidateRegistry(ABC):
    """Contract for sources of candidate decision documents."""

    @abstractmethod
    async def fetch(self, max_count: int) -> list[CandidateDocument]:
        """Return up to max_count candidates in registry order.

        Raises:
            RegistryUnavailableError: if the registry cannot be reached or
                answers with something other than a list of records.
        """
