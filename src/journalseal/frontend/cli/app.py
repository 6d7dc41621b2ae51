"""Textual form for encrypting a journal entry and sending it to a recipient.

Start here with the `journalseal` console script (or `python main.py` from a checkout).
"""

from __future__ import annotations

import threading

from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, Footer, Header, Input, Label, Static

from journalseal.core.exceptions import SubmissionInProgressError, ValidationError
from journalseal.core.models import SubmissionState, SubmissionStatus
from journalseal.frontend.cli.context import AppContext, build_context

SUBMIT_WORKER = "submit_worker"
BUTTON_LABEL = "Encrypt and Send"


class JournalSealApp(App):
    """Single-form app: file, password, recipient, send."""

    TITLE = "Secure Journal Sharing"

    CSS = """
    #form { padding: 1 2; }
    .title { padding: 0 0 1 0; text-style: bold; }
    #send { margin: 1 0; width: 100%; }
    #status { height: 3; color: $text-muted; }
    #status.error { color: $error; }
    #status.success { color: $success; }
    """

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+s", "submit", "Encrypt and Send"),
    ]

    def __init__(self, ctx: AppContext | None = None):
        self.ctx = ctx or build_context()
        super().__init__()

        self.path_input: Input | None = None
        self.password_input: Input | None = None
        self.recipient_input: Input | None = None
        self.send_button: Button | None = None
        self.status: Static | None = None
        self.status_message: str = ""
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="form"):
            yield Static("Upload Journal Entry (PDF or .docx)", classes="title")
            yield Label("File path")
            self.path_input = Input(placeholder="/path/to/journal.pdf", id="file-path")
            yield self.path_input
            yield Label("Encryption Password")
            self.password_input = Input(placeholder="••••••", password=True, id="password")
            yield self.password_input
            yield Label("Recipient's Email")
            self.recipient_input = Input(placeholder="therapist@example.com", id="recipient")
            yield self.recipient_input
            self.send_button = Button(BUTTON_LABEL, id="send", variant="primary")
            yield self.send_button
            self.status = Static("", id="status")
            yield self.status
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.ctx.controller.subscribe(self._on_state)
        self.set_focus(self.path_input)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()

    # === State rendering ===

    def _set_status(self, message: str, kind: str = "") -> None:
        self.status_message = message
        if self.status:
            self.status.update(message)
            self.status.set_class(kind == "error", "error")
            self.status.set_class(kind == "success", "success")

    def _render_state(self, state: SubmissionState) -> None:
        kind = ""
        if state.status is SubmissionStatus.ERROR:
            kind = "error"
        elif state.status is SubmissionStatus.SUCCESS:
            kind = "success"
        self._set_status(state.label, kind)
        if self.send_button:
            self.send_button.disabled = state.is_busy
            self.send_button.label = state.label if state.is_busy else BUTTON_LABEL

    def _on_state(self, state: SubmissionState) -> None:
        # The controller notifies on whichever thread runs the pipeline.
        if threading.current_thread() is threading.main_thread():
            self._render_state(state)
        else:
            self.call_from_thread(self._render_state, state)

    # === Actions ===

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send":
            self.action_submit()

    def action_submit(self) -> None:
        controller = self.ctx.controller
        if controller.is_busy:
            self._set_status("A submission is already in progress")
            return

        path = self.path_input.value.strip()
        if path:
            try:
                controller.select_file_path(path)
            except ValidationError as exc:
                self._set_status(str(exc), "error")
                return
        else:
            controller.file = None
        controller.password = self.password_input.value
        controller.recipient = self.recipient_input.value.strip()

        if self.send_button:
            self.send_button.disabled = True
        self.run_worker(
            self._submit_worker,
            name=SUBMIT_WORKER,
            exclusive=True,
            thread=True,
        )

    def _submit_worker(self) -> SubmissionState:
        """Runs the whole pipeline off the UI thread."""
        try:
            return self.ctx.controller.submit()
        except SubmissionInProgressError:
            return self.ctx.controller.state

    def on_worker_state_changed(self, event) -> None:
        """Handle worker completion to update UI."""
        if event.worker.name != SUBMIT_WORKER or not event.worker.is_finished:
            return

        state = event.worker.result
        if state is None:
            # worker raised or was cancelled
            state = SubmissionState.error(str(event.worker.error or ""))
        self._render_state(state)

        if state.status is SubmissionStatus.SUCCESS:
            # Clear form
            self.path_input.value = ""
            self.password_input.value = ""
            self.recipient_input.value = ""


def main() -> None:  # pragma: no cover
    from journalseal.frontend.cli.logging_config import configure_logging

    ctx = build_context()
    configure_logging(ctx.settings.log_level)
    JournalSealApp(ctx=ctx).run()


if __name__ == "__main__":  # pragma: no cover
    main()
