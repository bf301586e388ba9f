"""Prompt assembly."""

from impactlens.assembler.prompt_assembler import (
    SYSTEM_INSTRUCTION,
    DiagnosticPrompt,
    PromptAssembler,
)

__all__ = ["PromptAssembler", "DiagnosticPrompt", "SYSTEM_INSTRUCTION"]
