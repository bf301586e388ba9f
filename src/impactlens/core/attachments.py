"""Reading local files into in-memory attachments."""

import base64
import uuid
from pathlib import Path

from impactlens.core.errors import InputValidationError
from impactlens.schemas.inputs import Attachment

ACCEPTED_MIME_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


def new_attachment_id() -> str:
    return uuid.uuid4().hex


def read_attachment(path: Path) -> Attachment:
    """
    Read a whole file into memory as a base64 attachment.

    Args:
        path: Local file path

    Returns:
        Attachment with a fresh id

    Raises:
        InputValidationError: If the file is missing or of an unsupported type
    """
    path = Path(path)
    mime_type = ACCEPTED_MIME_TYPES.get(path.suffix.lower())
    if mime_type is None:
        accepted = ", ".join(ACCEPTED_MIME_TYPES)
        raise InputValidationError(
            f"Unsupported attachment type '{path.suffix or path.name}'. Accepted: {accepted}"
        )

    try:
        payload = path.read_bytes()
    except OSError as e:
        raise InputValidationError(f"Could not read attachment {path}: {e}") from e

    return Attachment(
        id=new_attachment_id(),
        name=path.name,
        mime_type=mime_type,
        data=base64.b64encode(payload).decode("ascii"),
    )
