"""Small helper to build a JournalSeal app context for the TUI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from journalseal.core.config import Settings, load_settings
from journalseal.core.controller import Normalizer, SubmissionController, Transport
from journalseal.core.normalizer import DocumentNormalizer
from journalseal.network.transport import HttpTransport


@dataclass
class AppContext:
    """Container for runtime objects the UI needs."""

    settings: Settings
    controller: SubmissionController


def build_context(
    environ: Optional[Mapping[str, str]] = None,
    normalizer: Optional[Normalizer] = None,
    transport: Optional[Transport] = None,
) -> AppContext:
    """
    Load settings and wire a SubmissionController to its collaborators.

    By default documents go through :class:`DocumentNormalizer` and are
    delivered with :class:`HttpTransport` to ``JOURNALSEAL_ENDPOINT``. Tests
    and embedding callers may pass their own normalizer or transport.
    """
    settings = load_settings(environ)
    if normalizer is None:
        normalizer = DocumentNormalizer()
    if transport is None:
        transport = HttpTransport(endpoint=settings.endpoint, timeout=settings.timeout)

    controller = SubmissionController(normalizer=normalizer, transport=transport)
    return AppContext(settings=settings, controller=controller)
