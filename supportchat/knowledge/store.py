"""
Knowledge Base - Static text blob injected into the system prompt.
"""

import logging

from ..storage import StorageInterface

logger = logging.getLogger(__name__)


class KnowledgeBase:
    """Single markdown document kept in blob storage."""

    def __init__(self, storage: StorageInterface, path: str = "knowledge_base.md"):
        self.storage = storage
        self.path = path

    async def get_text(self) -> str:
        """Return the knowledge-base text, or "" if missing or unreadable."""
        content = await self.storage.load(self.path)
        if content is None:
            logger.warning(f"Knowledge base file not found: {self.path}")
            return ""
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError:
            logger.error(f"Knowledge base file is not valid UTF-8: {self.path}")
            return ""

    async def set_text(self, content: str) -> bool:
        """Replace the knowledge base."""
        ok = await self.storage.save(self.path, content)
        if ok:
            logger.info(f"Knowledge base updated ({len(content)} chars)")
        return ok

    async def append_text(self, content: str) -> bool:
        """Append a new section, separated from existing text by a blank line."""
        ok = await self.storage.append(self.path, "\n\n" + content)
        if ok:
            logger.info(f"Knowledge base appended ({len(content)} chars)")
        return ok
