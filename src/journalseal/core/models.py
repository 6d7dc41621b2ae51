"""
Data models for a submission: the picked document, its normalized form,
the transport acknowledgment and the observable submission state.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
import mimetypes


class SubmissionStatus(Enum):
    # Where a submission is in the pipeline; the UI reads this
    IDLE = "idle"
    PROCESSING = "processing"
    ENCRYPTING = "encrypting"
    SENDING = "sending"
    SUCCESS = "success"
    ERROR = "error"


BUSY_STATUSES = frozenset(
    {SubmissionStatus.PROCESSING, SubmissionStatus.ENCRYPTING, SubmissionStatus.SENDING}
)

_LABELS = {
    SubmissionStatus.IDLE: "",
    SubmissionStatus.PROCESSING: "Processing...",
    SubmissionStatus.ENCRYPTING: "Encrypting...",
    SubmissionStatus.SENDING: "Sending...",
    SubmissionStatus.SUCCESS: "File has been encrypted and sent successfully!",
}

GENERIC_ERROR = "There was an error processing your request. Please try again."
SEND_FAILED = "Failed to send file"


@dataclass(frozen=True)
class SubmissionState:
    """Immutable snapshot of a submission; ``message`` is only set for errors."""

    status: SubmissionStatus = SubmissionStatus.IDLE
    message: Optional[str] = None

    @property
    def label(self) -> str:
        if self.status is SubmissionStatus.ERROR:
            return self.message or GENERIC_ERROR
        return _LABELS[self.status]

    @property
    def is_busy(self) -> bool:
        return self.status in BUSY_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in (SubmissionStatus.SUCCESS, SubmissionStatus.ERROR)

    @classmethod
    def error(cls, message: Optional[str]) -> "SubmissionState":
        return cls(SubmissionStatus.ERROR, message or GENERIC_ERROR)


@dataclass
class DocumentSelection:
    """The file the user picked, as raw bytes."""

    data: bytes
    filename: str
    mime_type: str = "application/octet-stream"

    @classmethod
    def from_bytes(cls, data: bytes, filename: str, mime_type: Optional[str] = None) -> "DocumentSelection":
        if mime_type is None:
            guessed, _ = mimetypes.guess_type(filename)
            mime_type = guessed or "application/octet-stream"
        return cls(data=bytes(data), filename=filename, mime_type=mime_type)

    @classmethod
    def from_path(cls, path: str | Path) -> "DocumentSelection":
        path = Path(path).expanduser()
        return cls.from_bytes(path.read_bytes(), path.name)

    def __repr__(self):
        return f"DocumentSelection(filename={self.filename!r}, mime_type={self.mime_type!r}, size={len(self.data)})"


@dataclass
class NormalizedDocument:
    """Byte stream ready for encryption, plus the name/type it now carries."""

    data: bytes
    filename: str
    mime_type: str = "application/pdf"


@dataclass(frozen=True)
class Ack:
    """Acknowledgment returned by a transport."""

    success: bool
    message: Optional[str] = None
