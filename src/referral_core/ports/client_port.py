"""
Client source port interface.

Defines the contract for whatever supplies the flat client list.
"""

from abc import ABC, abstractmethod
from typing import List

from ..domain.models import ClientRecord


class ClientSourcePort(ABC):
    """
    Abstract interface for loading client records.

    Implementations read from a file, an API response or memory. Loading is
    synchronous; the engine never performs I/O itself.
    """

    @abstractmethod
    def load_clients(self) -> List[ClientRecord]:
        """Return the ordered client list."""
        pass

    @property
    def description(self) -> str:
        """Human-readable origin of the records (for logs and titles)."""
        return type(self).__name__
