"""
Storage Interface - Abstract base class for blob storage implementations.
The knowledge base is kept behind this interface so the backing store
(local disk today) can be swapped without touching prompt assembly.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageInterface(ABC):
    """Contract for text/binary blob storage addressed by relative paths."""

    @abstractmethod
    async def save(self, path: str, content: bytes | str) -> bool:
        """
        Save content to the specified path, replacing any existing content.

        Args:
            path: Relative path (e.g., "knowledge_base.md")
            content: Content to save

        Returns:
            bool: True if save was successful, False otherwise
        """
        pass

    @abstractmethod
    async def load(self, path: str) -> Optional[bytes]:
        """
        Load content from the specified path.

        Returns:
            Optional[bytes]: File content, or None if the file doesn't exist
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    async def append(self, path: str, content: str) -> bool:
        """
        Append text to a file, creating it if needed.

        Returns:
            bool: True if append was successful
        """
        pass
