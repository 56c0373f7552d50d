"""Loading and validation of Claude.ai conversation exports.

The export is a JSON array of conversations. It is validated against
pydantic models before any cost is computed, and a failure reports every
offending field by its dotted path (``0.chat_messages.3.sender``).
Validated records are converted to the plain ``exparse.models`` dataclasses
so the accounting code never sees pydantic types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, StrictStr, TypeAdapter, ValidationError

from exparse.models import Conversation, Message

logger = logging.getLogger(__name__)


class ExportFile(BaseModel):
    """A file reference attached to a chat message."""

    file_name: StrictStr


class ExportContent(BaseModel):
    """A content block of a chat message."""

    start_timestamp: StrictStr | None
    stop_timestamp: StrictStr | None
    type: StrictStr
    text: StrictStr | None = None


class ExportChatMessage(BaseModel):
    """A chat message as it appears in the export."""

    uuid: StrictStr
    text: StrictStr | None = None
    content: list[ExportContent]
    sender: StrictStr
    created_at: StrictStr
    updated_at: StrictStr
    attachments: list[Any]
    files: list[ExportFile]


class ExportAccount(BaseModel):
    """The account that owns a conversation."""

    uuid: StrictStr


class ExportConversation(BaseModel):
    """A conversation as it appears in the export."""

    uuid: StrictStr
    name: StrictStr
    created_at: StrictStr
    updated_at: StrictStr
    account: ExportAccount
    chat_messages: list[ExportChatMessage]


_CHAT_HISTORY = TypeAdapter(list[ExportConversation])


@dataclass(frozen=True)
class SchemaIssue:
    """A single validation failure at a field path."""

    path: str
    code: str
    message: str


class ExportError(ValueError):
    """Base class for export loading failures."""


class ExportReadError(ExportError):
    """The export could not be read or is not valid JSON."""


class ExportValidationError(ExportError):
    """The export does not match the expected schema."""

    def __init__(self, issues: list[SchemaIssue]) -> None:
        """Initialize with the list of validation issues."""
        self.issues = issues
        noun = "issue" if len(issues) == 1 else "issues"
        super().__init__(f"Export failed validation ({len(issues)} {noun})")


def _format_loc(loc: tuple[int | str, ...]) -> str:
    """Join a pydantic error location into a dotted path."""
    return ".".join(str(part) for part in loc)


def issues_from_validation_error(exc: ValidationError) -> list[SchemaIssue]:
    """Flatten a pydantic ValidationError into path-qualified issues."""
    return [
        SchemaIssue(
            path=_format_loc(err["loc"]),
            code=err["type"],
            message=err["msg"],
        )
        for err in exc.errors()
    ]


def _to_conversation(record: ExportConversation) -> Conversation:
    """Convert a validated export record to a domain Conversation."""
    return Conversation(
        name=record.name,
        messages=tuple(
            Message(
                sender=msg.sender,
                text=msg.text,
                uuid=msg.uuid,
                created_at=msg.created_at,
            )
            for msg in record.chat_messages
        ),
        uuid=record.uuid,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def parse_export(data: Any) -> list[Conversation]:
    """Validate decoded export data and return its conversations in order.

    Args:
        data: Decoded JSON (expected to be a list of conversation objects)

    Returns:
        List of Conversation in export order

    Raises:
        ExportValidationError: If the data does not match the export schema
    """
    try:
        records = _CHAT_HISTORY.validate_python(data)
    except ValidationError as exc:
        raise ExportValidationError(issues_from_validation_error(exc)) from exc
    return [_to_conversation(record) for record in records]


def load_export(path: str | Path) -> list[Conversation]:
    """Read, decode and validate a conversations export file.

    Args:
        path: Path to conversations.json

    Returns:
        List of Conversation in export order

    Raises:
        ExportReadError: If the file cannot be read or is not valid JSON
        ExportValidationError: If the content does not match the schema
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read {path}: {exc.strerror or exc}"
        raise ExportReadError(msg) from exc

    logger.debug("Read %d bytes from %s", len(raw), path)

    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        msg = f"{path} is not valid JSON: {exc}"
        raise ExportReadError(msg) from exc

    conversations = parse_export(data)
    logger.debug("Loaded %d conversations from %s", len(conversations), path)
    return conversations
