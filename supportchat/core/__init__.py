"""Core module - prompt assembly and the streaming relay."""

from .prompt_assembler import PromptAssembler, AssembledPrompt
from .stream_relay import StreamRelay, RelayState, STREAM_ERROR_MESSAGE

__all__ = ['PromptAssembler', 'AssembledPrompt', 'StreamRelay', 'RelayState', 'STREAM_ERROR_MESSAGE']
