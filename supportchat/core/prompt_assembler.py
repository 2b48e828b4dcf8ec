"""
Prompt Assembler - Builds the message array sent upstream for one turn.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..knowledge import KnowledgeBase
from ..llm.base import LLMMessage
from ..prompts import (
    generate_system_prompt,
    generate_document_analysis_prompt,
    strip_knowledge_base,
)
from ..sessions import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class AssembledPrompt:
    """Messages for one upstream call."""
    messages: List[LLMMessage]
    includes_knowledge_base: bool = False


class PromptAssembler:
    """
    Combines the persona prompt, the knowledge base and the session history.

    The system prompt is rebuilt for every call and never stored in the
    session. The knowledge base is included until the session has been
    marked as having received it; after that the system prompt is cut at the
    knowledge-base marker.
    """

    def __init__(
        self,
        store: SessionStore,
        knowledge_base: Optional[KnowledgeBase],
        project_name: str,
        project_type: str,
    ):
        self.store = store
        self.knowledge_base = knowledge_base
        self.project_name = project_name
        self.project_type = project_type

    async def build(self, session_id: str, user_message: str) -> AssembledPrompt:
        """
        Record the user turn and assemble ``[system] + history``.

        Does not mark the knowledge base as sent; the caller does that once
        the upstream call has succeeded.
        """
        self.store.add_message(session_id, "user", user_message)

        knowledge = await self.knowledge_base.get_text() if self.knowledge_base else ""
        system_content = generate_system_prompt(self.project_name, self.project_type, knowledge)

        kb_already_sent = self.store.has_sent_kb(session_id)
        if kb_already_sent:
            system_content = strip_knowledge_base(system_content)
        includes_knowledge_base = bool(knowledge) and not kb_already_sent

        history = self.store.get_messages(session_id)
        messages = [LLMMessage.text("system", system_content)]
        messages.extend(LLMMessage.text(m.role, m.content) for m in history)

        logger.debug(
            f"Assembled prompt for session {session_id}: {len(messages)} messages, "
            f"knowledge base {'included' if includes_knowledge_base else 'omitted'}"
        )
        return AssembledPrompt(messages=messages, includes_knowledge_base=includes_knowledge_base)

    def build_document_analysis(self, document_text: str) -> List[LLMMessage]:
        return [
            LLMMessage.text("system", generate_document_analysis_prompt(self.project_name, self.project_type)),
            LLMMessage.text("user", document_text),
        ]
