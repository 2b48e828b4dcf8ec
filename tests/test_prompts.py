"""
Tests for system prompt generation and prompt assembly.
"""

import pytest

from supportchat.core.prompt_assembler import PromptAssembler
from supportchat.knowledge import KnowledgeBase
from supportchat.prompts import (
    KNOWLEDGE_BASE_MARKER,
    generate_system_prompt,
    generate_document_analysis_prompt,
    strip_knowledge_base,
)
from supportchat.storage import LocalStorage

KB_TEXT = "# Pricing\nWe offer a free tier and a Pro plan at $20 per month."


class TestSystemPrompt:

    def test_includes_knowledge_base(self):
        prompt = generate_system_prompt("BTAssetHub", "digital asset management", KB_TEXT)
        assert "You are the BTAssetHub AI assistant" in prompt
        assert KNOWLEDGE_BASE_MARKER in prompt
        assert KB_TEXT in prompt

    def test_empty_knowledge_base_omits_marker(self):
        prompt = generate_system_prompt("BTAssetHub", "digital asset management", "")
        assert KNOWLEDGE_BASE_MARKER not in prompt
        assert "If you don't know specific details" in prompt

    def test_strip_knowledge_base(self):
        prompt = generate_system_prompt("Acme", "analytics", KB_TEXT)
        stripped = strip_knowledge_base(prompt)
        assert KB_TEXT not in stripped
        assert KNOWLEDGE_BASE_MARKER not in stripped
        assert stripped.startswith("You are the Acme AI assistant")
        assert stripped == stripped.strip()

    def test_strip_without_marker_is_noop(self):
        assert strip_knowledge_base("plain prompt") == "plain prompt"

    def test_document_analysis_prompt(self):
        prompt = generate_document_analysis_prompt("Acme", "analytics")
        assert "Analyze the following document" in prompt
        assert "analytics" in prompt


@pytest.fixture
def knowledge_base(tmp_path):
    return KnowledgeBase(LocalStorage(str(tmp_path)), "knowledge_base.md")


class TestPromptAssembler:

    @pytest.mark.asyncio
    async def test_first_turn_includes_knowledge_base(self, store, knowledge_base):
        await knowledge_base.set_text(KB_TEXT)
        assembler = PromptAssembler(store, knowledge_base, "BTAssetHub", "digital asset management")

        prompt = await assembler.build("s1", "What does Pro cost?")

        assert prompt.includes_knowledge_base is True
        assert [m.role for m in prompt.messages] == ["system", "user"]
        assert KB_TEXT in prompt.messages[0].content
        assert prompt.messages[1].content == "What does Pro cost?"

    @pytest.mark.asyncio
    async def test_user_turn_recorded_before_call(self, store, knowledge_base):
        assembler = PromptAssembler(store, knowledge_base, "Acme", "analytics")
        await assembler.build("s1", "Hello")

        history = store.get_messages("s1")
        assert [(m.role, m.content) for m in history] == [("user", "Hello")]

    @pytest.mark.asyncio
    async def test_system_prompt_not_stored(self, store, knowledge_base):
        assembler = PromptAssembler(store, knowledge_base, "Acme", "analytics")
        await assembler.build("s1", "Hello")
        assert all(m.role != "system" for m in store.get_messages("s1"))

    @pytest.mark.asyncio
    async def test_knowledge_base_stripped_once_sent(self, store, knowledge_base):
        await knowledge_base.set_text(KB_TEXT)
        assembler = PromptAssembler(store, knowledge_base, "Acme", "analytics")

        await assembler.build("s1", "First")
        store.add_message("s1", "assistant", "Answer")
        store.mark_kb_sent("s1")

        prompt = await assembler.build("s1", "Second")
        system = prompt.messages[0].content
        assert prompt.includes_knowledge_base is False
        assert KB_TEXT not in system
        assert KNOWLEDGE_BASE_MARKER not in system
        assert [m.content for m in prompt.messages[1:]] == ["First", "Answer", "Second"]

    @pytest.mark.asyncio
    async def test_knowledge_base_resent_until_marked(self, store, knowledge_base):
        await knowledge_base.set_text(KB_TEXT)
        assembler = PromptAssembler(store, knowledge_base, "Acme", "analytics")

        await assembler.build("s1", "First")
        prompt = await assembler.build("s1", "Retry")
        assert prompt.includes_knowledge_base is True
        assert KB_TEXT in prompt.messages[0].content

    @pytest.mark.asyncio
    async def test_missing_knowledge_base(self, store, knowledge_base):
        assembler = PromptAssembler(store, knowledge_base, "Acme", "analytics")
        prompt = await assembler.build("s1", "Hello")
        assert prompt.includes_knowledge_base is False
        assert KNOWLEDGE_BASE_MARKER not in prompt.messages[0].content

    def test_document_analysis_messages(self, store):
        assembler = PromptAssembler(store, None, "Acme", "analytics")
        messages = assembler.build_document_analysis("Quarterly report text")
        assert [m.role for m in messages] == ["system", "user"]
        assert messages[1].content == "Quarterly report text"
        assert len(store) == 0
