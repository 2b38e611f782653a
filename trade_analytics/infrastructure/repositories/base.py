"""Base Repository: Abstract interface for trade sources.

A repository hides where statement data comes from (a CSV export, a set
of screenshots) behind get_all(). Implementations read their source
lazily, parse it once and keep the result until clear_cache() is called.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TypeVar, Generic

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Read-only, cached access to one source.

    Implementations must:
    1. Load lazily on the first get_all() call
    2. Return the cached value on later calls
    3. Report unreadable sources as RepositoryError
    """

    @abstractmethod
    def get_all(self) -> T:
        """Load (or return the cached) contents of the source.

        Raises:
            RepositoryError: If the source cannot be read
        """
        pass

    @abstractmethod
    def clear_cache(self) -> None:
        """Forget the cached contents so the next get_all() reloads."""
        pass


class RepositoryError(Exception):
    """A source file is missing or unreadable.

    Attributes:
        path: The offending file, as a string (None if not file-based)
    """

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        detail = f" (path: {self.path})" if self.path else ""
        super().__init__(f"{message}{detail}")
