"""
HTTP delivery of an encrypted container to the journal backend.

The container is posted as a multipart form:

  file              -> encrypted_<name of the encrypted document>, content type application/encrypted
  therapistEmail    -> recipient address
  originalFileName  -> name of the file the user picked

The backend answers with JSON. A non-2xx status carries ``{"error": ...}``;
a 2xx status may carry ``{"success": bool, "message": ...}``.
"""
import logging
from typing import Optional

import requests

from journalseal.core.config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from journalseal.core.exceptions import TransportError
from journalseal.core.models import SEND_FAILED, Ack

logger = logging.getLogger(__name__)

CONTAINER_MIME = "application/encrypted"
FIELD_FILE = "file"
FIELD_RECIPIENT = "therapistEmail"
FIELD_ORIGINAL_NAME = "originalFileName"


class HttpTransport:
    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(
        self,
        container: bytes,
        recipient: str,
        original_filename: str,
        upload_name: Optional[str] = None,
    ) -> Ack:
        """
        Post ``container`` for ``recipient`` and return the backend's Ack.

        ``upload_name`` is the name of the document that was encrypted (e.g. the
        ``.pdf`` a Word file was converted to); it defaults to ``original_filename``.

        Raises TransportError on network failure or when the reply is not JSON.
        An explicit rejection from the backend comes back as ``Ack(success=False)``.
        """
        files = {FIELD_FILE: (f"encrypted_{upload_name or original_filename}", container, CONTAINER_MIME)}
        data = {FIELD_RECIPIENT: recipient, FIELD_ORIGINAL_NAME: original_filename}

        logger.info("Sending %d byte container to %s", len(container), self.endpoint)
        try:
            response = self.session.post(
                self.endpoint,
                files=files,
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"Could not reach {self.endpoint}: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(
                f"Malformed acknowledgment from server (HTTP {response.status_code})"
            ) from exc
        if not isinstance(body, dict):
            raise TransportError(f"Malformed acknowledgment from server (HTTP {response.status_code})")

        if not response.ok:
            logger.warning("Backend rejected upload: HTTP %s", response.status_code)
            return Ack(success=False, message=body.get("error") or SEND_FAILED)

        success = body.get("success", True)
        if not isinstance(success, bool):
            raise TransportError("Malformed acknowledgment from server: 'success' is not a boolean")
        message = body.get("message") if success else (body.get("error") or body.get("message"))
        return Ack(success=success, message=message)

    def close(self) -> None:
        self.session.close()
