"""Launchpad generation: prompt assembly and file-block parsing."""

from launchpad.generation.file_blocks import FileOutput, parse_file_blocks
from launchpad.generation.prompts import (
    READY_TOKEN,
    build_generation_prompt,
    conversation_system_prompt,
    extraction_prompt,
)

__all__ = [
    "FileOutput",
    "READY_TOKEN",
    "build_generation_prompt",
    "conversation_system_prompt",
    "extraction_prompt",
    "parse_file_blocks",
]
