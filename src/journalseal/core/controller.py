"""Submission controller: drives normalize -> encrypt -> send and owns the state.

States move strictly forward through ``IDLE -> PROCESSING -> ENCRYPTING ->
SENDING -> SUCCESS``; a failure at any stage (or a missing field before any
work starts) ends in ``ERROR``. Both terminal states are left by the next
``submit()``, which resets to ``IDLE`` first.

The controller is the only writer of its state. Observers registered with
:meth:`SubmissionController.subscribe` are called synchronously, on the thread
running the pipeline, every time the state changes. An observer that raises
is logged and skipped; the pipeline carries on.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, Protocol

from journalseal.core.exceptions import (
    SubmissionInProgressError,
    TransportError,
    ValidationError,
)
from journalseal.core.models import (
    SEND_FAILED,
    Ack,
    DocumentSelection,
    NormalizedDocument,
    SubmissionState,
    SubmissionStatus,
)
from journalseal.security.crypto import encrypt_document

logger = logging.getLogger(__name__)


class Normalizer(Protocol):
    def normalize(self, raw: bytes, mime_type: str, filename: str) -> NormalizedDocument | bytes: ...


class Transport(Protocol):
    def send(
        self,
        container: bytes,
        recipient: str,
        original_filename: str,
        upload_name: Optional[str] = None,
    ) -> Ack: ...


Observer = Callable[[SubmissionState], None]
Encryptor = Callable[[bytes, str], bytes]


class SubmissionController:
    """
    Holds the form fields of one submission lifecycle and runs the pipeline.

    - ``file``: the picked :class:`DocumentSelection`
    - ``password``: password the key is derived from
    - ``recipient``: address the container is delivered to

    At most one pipeline runs per instance; calling :meth:`submit` while busy
    raises :class:`SubmissionInProgressError` and leaves everything untouched.
    """

    def __init__(
        self,
        normalizer: Normalizer,
        transport: Transport,
        encryptor: Encryptor = encrypt_document,
    ):
        self.normalizer = normalizer
        self.transport = transport
        self.encryptor = encryptor

        self.file: Optional[DocumentSelection] = None
        self.password: str = ""
        self.recipient: str = ""

        self._state = SubmissionState()
        self._observers: List[Observer] = []
        self._lock = threading.Lock()
        # set for the whole pipeline; guards against a second concurrent submit
        self._running = False

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def label(self) -> str:
        return self._state.label

    @property
    def is_busy(self) -> bool:
        return self._running or self._state.is_busy

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer`` and return a callable that unregisters it."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def _transition(self, state: SubmissionState) -> SubmissionState:
        self._state = state
        if state.status is SubmissionStatus.ERROR:
            logger.warning("Submission failed: %s", state.message)
        else:
            logger.info("Submission state -> %s", state.status.value)
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception:
                logger.exception("Observer %r failed on %s", observer, state.status.value)
        return state

    def _fail(self, message: Optional[str]) -> SubmissionState:
        return self._transition(SubmissionState.error(message))

    # ------------------------------------------------------------------
    # Form fields
    # ------------------------------------------------------------------

    def select_file(self, data: bytes, filename: str, mime_type: Optional[str] = None) -> DocumentSelection:
        self.file = DocumentSelection.from_bytes(data, filename, mime_type)
        return self.file

    def select_file_path(self, path: str | Path) -> DocumentSelection:
        """Read ``path`` into the file selection; raise ValidationError if unreadable."""
        try:
            self.file = DocumentSelection.from_path(path)
        except OSError as exc:
            raise ValidationError(f"Cannot read {path}: {exc.strerror or exc}") from exc
        return self.file

    def missing_fields(self) -> List[str]:
        missing = []
        if self.file is None:
            missing.append("file")
        if not self.password:
            missing.append("password")
        if not self.recipient or not self.recipient.strip():
            missing.append("recipient address")
        return missing

    def reset(self) -> SubmissionState:
        """Return to ``IDLE`` without touching the form fields."""
        with self._lock:
            if self._running:
                raise SubmissionInProgressError("A submission is already in progress")
        return self._transition(SubmissionState())

    def _clear_sensitive(self) -> None:
        self.password = ""
        self.file = None
        self.recipient = ""

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def submit(self) -> SubmissionState:
        """
        Run one submission to completion and return the terminal state.

        Stage failures never propagate: each is caught at its boundary and
        turned into the ``ERROR`` state so the controller stays usable.
        """
        with self._lock:
            if self._running:
                raise SubmissionInProgressError("A submission is already in progress")
            self._running = True
        try:
            return self._run()
        finally:
            self._running = False

    def _run(self) -> SubmissionState:
        self._transition(SubmissionState())

        missing = self.missing_fields()
        if missing:
            return self._fail("Please fill in all fields (missing: " + ", ".join(missing) + ")")

        # Snapshot the fields so edits made while we run cannot leak into this attempt.
        selection = self.file
        password = self.password
        recipient = self.recipient.strip()

        self._transition(SubmissionState(SubmissionStatus.PROCESSING))
        try:
            normalized = self.normalizer.normalize(selection.data, selection.mime_type, selection.filename)
            if isinstance(normalized, NormalizedDocument):
                plaintext, upload_name = normalized.data, normalized.filename
            else:
                plaintext, upload_name = bytes(normalized), selection.filename
        except Exception as exc:
            logger.error("Normalization of %s failed: %s", selection.filename, exc)
            return self._fail(str(exc))

        self._transition(SubmissionState(SubmissionStatus.ENCRYPTING))
        try:
            container = self.encryptor(plaintext, password)
        except Exception as exc:
            logger.error("Encryption of %s failed: %s", selection.filename, exc)
            return self._fail(str(exc))

        logger.debug("Container for %s is %d bytes", selection.filename, len(container))
        self._transition(SubmissionState(SubmissionStatus.SENDING))
        try:
            ack = self.transport.send(container, recipient, selection.filename, upload_name=upload_name)
        except TransportError as exc:
            logger.error("Transport failed for %s: %s", selection.filename, exc)
            return self._fail(str(exc) or SEND_FAILED)
        except Exception as exc:
            logger.exception("Unexpected transport failure for %s", selection.filename)
            return self._fail(str(exc) or SEND_FAILED)

        if not isinstance(ack, Ack):
            return self._fail("Malformed acknowledgment from transport")
        if not ack.success:
            return self._fail(ack.message or SEND_FAILED)

        self._clear_sensitive()
        return self._transition(SubmissionState(SubmissionStatus.SUCCESS))
