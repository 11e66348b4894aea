"""Parser for the delimited file-block protocol.

The generation reply is a sequence of blocks::

    ===FILE: relative/path===
    (content)
    ===END_FILE===

Anything outside the blocks is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from launchpad.errors import MalformedOutputError
from launchpad.logging import get_logger

logger = get_logger(__name__)

FILE_START = "===FILE: "
FILE_PATH_END = "==="
FILE_END = "===END_FILE==="


class FileOutput(BaseModel):
    """A single file the backend wants to create."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to the project root")
    content: str = Field(default="", description="Raw file content")


def parse_file_blocks(raw: str, strict: bool = True) -> list[FileOutput]:
    """Parse every file block in *raw*, in source order.

    Text with no start marker yields an empty list. Content is trimmed of
    surrounding whitespace.

    Args:
        raw: The backend's generation reply.
        strict: When ``True`` an unterminated block raises. When ``False``
            parsing stops at the unterminated block and the blocks parsed so
            far are returned.

    Raises:
        MalformedOutputError: In strict mode, for a start marker without a
            closing ``===`` or ``===END_FILE===``, or with a blank path.
    """
    files: list[FileOutput] = []
    pos = 0

    while True:
        start = raw.find(FILE_START, pos)
        if start == -1:
            break

        path_start = start + len(FILE_START)
        path_end = raw.find(FILE_PATH_END, path_start)
        if path_end == -1:
            if strict:
                raise MalformedOutputError(
                    f"file block at offset {start} has no closing '{FILE_PATH_END}' after its path"
                )
            logger.warning("Truncating file blocks at offset %d: unterminated path", start)
            break

        path = raw[path_start:path_end].strip()
        content_start = path_end + len(FILE_PATH_END)
        content_end = raw.find(FILE_END, content_start)
        if content_end == -1:
            if strict:
                raise MalformedOutputError(
                    f"file block {path!r} is missing '{FILE_END}' -- the reply may be truncated"
                )
            logger.warning("Truncating file blocks at %r: missing end marker", path)
            break

        if not path:
            if strict:
                raise MalformedOutputError(f"file block at offset {start} has an empty path")
            logger.warning("Skipping file block at offset %d with an empty path", start)
        else:
            files.append(FileOutput(path=path, content=raw[content_start:content_end].strip()))
        pos = content_end + len(FILE_END)

    logger.debug("Parsed %d file block(s)", len(files))
    return files
