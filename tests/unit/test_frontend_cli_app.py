"""Unit tests for the JournalSeal Textual App (Frontend)."""

import pytest
from unittest.mock import Mock

from journalseal.core.config import Settings
from journalseal.core.controller import SubmissionController
from journalseal.core.exceptions import NormalizationError
from journalseal.core.models import Ack, NormalizedDocument, SubmissionStatus
from journalseal.frontend.cli.app import BUTTON_LABEL, JournalSealApp
from journalseal.frontend.cli.context import AppContext


# --- Fixtures ---

@pytest.fixture
def controller():
    normalizer = Mock()
    normalizer.normalize.side_effect = lambda raw, mime, name: NormalizedDocument(data=raw, filename=name)
    transport = Mock()
    transport.send.return_value = Ack(success=True)
    encryptor = Mock(return_value=b"c" * 49)
    return SubmissionController(normalizer=normalizer, transport=transport, encryptor=encryptor)


@pytest.fixture
def mock_context(controller):
    return AppContext(settings=Settings(), controller=controller)


@pytest.fixture
def journal_file(tmp_path):
    path = tmp_path / "entry.pdf"
    path.write_bytes(b"%PDF-1.4 dear diary")
    return path


async def _submit_and_wait(app, pilot):
    app.action_submit()
    await app.workers.wait_for_complete()
    await pilot.pause()


# --- Tests ---

@pytest.mark.asyncio
async def test_successful_submission_clears_form(mock_context, journal_file):
    app = JournalSealApp(ctx=mock_context)
    async with app.run_test() as pilot:
        app.path_input.value = str(journal_file)
        app.password_input.value = "correct-horse"
        app.recipient_input.value = "therapist@example.com"

        await _submit_and_wait(app, pilot)

        assert mock_context.controller.state.status is SubmissionStatus.SUCCESS
        assert app.status_message == "File has been encrypted and sent successfully!"
        assert app.path_input.value == ""
        assert app.password_input.value == ""
        assert app.recipient_input.value == ""
        assert app.send_button.disabled is False
        assert str(app.send_button.label) == BUTTON_LABEL

        mock_context.controller.transport.send.assert_called_once_with(
            b"c" * 49, "therapist@example.com", "entry.pdf", upload_name="entry.pdf"
        )


@pytest.mark.asyncio
async def test_send_button_with_empty_form_reports_missing_fields(mock_context):
    app = JournalSealApp(ctx=mock_context)
    async with app.run_test() as pilot:
        await pilot.click("#send")
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert "missing: file, password, recipient address" in app.status_message
        assert app.status.has_class("error")
        mock_context.controller.encryptor.assert_not_called()


@pytest.mark.asyncio
async def test_unreadable_path_is_reported_without_running(mock_context, tmp_path):
    app = JournalSealApp(ctx=mock_context)
    async with app.run_test() as pilot:
        app.path_input.value = str(tmp_path / "missing.pdf")
        app.password_input.value = "pw"
        app.recipient_input.value = "a@b.c"

        app.action_submit()
        await pilot.pause()

        assert app.status_message.startswith("Cannot read")
        mock_context.controller.normalizer.normalize.assert_not_called()


@pytest.mark.asyncio
async def test_failed_submission_keeps_inputs(mock_context, journal_file):
    mock_context.controller.normalizer.normalize.side_effect = NormalizationError("Please upload a PDF file")
    app = JournalSealApp(ctx=mock_context)
    async with app.run_test() as pilot:
        app.path_input.value = str(journal_file)
        app.password_input.value = "correct-horse"
        app.recipient_input.value = "therapist@example.com"

        await _submit_and_wait(app, pilot)

        assert app.status_message == "Please upload a PDF file"
        assert app.path_input.value == str(journal_file)
        assert app.recipient_input.value == "therapist@example.com"
        mock_context.controller.encryptor.assert_not_called()
