"""Tests for the diagnostic session state."""

import pytest

from impactlens.core.diagnostic_client import EMPTY_INPUT_MESSAGE, DiagnosticClient
from impactlens.core.errors import GenerationInProgressError, InputValidationError, TransportError
from impactlens.core.session import DiagnosticSession
from impactlens.schemas.inputs import DEFAULT_INPUTS, INPUT_SECTIONS, DiagnosticInputs, ViewerType


@pytest.fixture
def session(mock_llm_client, sample_inputs):
    return DiagnosticSession(DiagnosticClient(mock_llm_client), sample_inputs)


def test_new_session_starts_from_default_inputs(mock_llm_client):
    session = DiagnosticSession(DiagnosticClient(mock_llm_client))
    assert session.inputs == DEFAULT_INPUTS
    assert session.viewer is ViewerType.RECRUITER
    assert session.result is None
    assert not session.loading


def test_update_section_by_either_name(session):
    session.update_section("nonNegotiables", "No on-call")
    session.update_section("work_traces", "Built the payments ledger")
    assert session.inputs.non_negotiables == "No on-call"
    assert session.inputs.work_traces == "Built the payments ledger"


def test_update_section_validates_text(session):
    session.update_section("friction", None)
    assert session.inputs.friction == ""
    assert session.has_content()

    session.update_section("failures", ["Missed the launch", "Lost a client"])
    assert session.inputs.failures == "Missed the launch\nLost a client"

    with pytest.raises(InputValidationError, match="failures"):
        session.update_section("failures", 42)
    assert session.inputs.failures == "Missed the launch\nLost a client"


def test_generate_stores_result(session, mock_llm_client):
    session.set_viewer("founder")
    report = session.generate()

    assert session.result is report
    assert session.error is None
    assert not session.loading
    assert mock_llm_client.generate.call_args.args[0].startswith("Viewer lens: founder")


def test_generation_replaces_previous_result(session, mock_llm_client):
    first = session.generate()
    second = session.generate()
    assert session.result is second
    assert second is not first
    assert mock_llm_client.generate.call_count == 2


def test_failure_keeps_inputs_and_attachments(session, mock_llm_client, sample_attachment):
    session.add_attachment(sample_attachment)
    inputs_before = session.inputs
    mock_llm_client.generate.side_effect = TransportError("Gemini API request failed: timeout")

    with pytest.raises(TransportError):
        session.generate()

    assert session.result is None
    assert session.error == "Gemini API request failed: timeout"
    assert session.inputs == inputs_before
    assert session.attachments == [sample_attachment]
    assert not session.loading


def test_empty_inputs_record_message(mock_llm_client):
    session = DiagnosticSession(DiagnosticClient(mock_llm_client), DiagnosticInputs.empty())

    with pytest.raises(InputValidationError):
        session.generate()

    assert session.error == EMPTY_INPUT_MESSAGE
    mock_llm_client.generate.assert_not_called()


def test_refuses_while_loading(session, mock_llm_client):
    session.loading = True

    with pytest.raises(GenerationInProgressError):
        session.generate()

    mock_llm_client.generate.assert_not_called()


def test_remove_attachment_keeps_order(session, sample_attachment):
    ids = ["a", "b", "c"]
    for attachment_id in ids:
        session.add_attachment(sample_attachment.model_copy(update={"id": attachment_id}))

    removed = session.remove_attachment("b")

    assert removed.id == "b"
    assert [a.id for a in session.attachments] == ["a", "c"]


def test_remove_unknown_attachment(session):
    with pytest.raises(KeyError):
        session.remove_attachment("missing")


def test_attach_file(session, tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("# Notes", encoding="utf-8")

    attachment = session.attach_file(path)

    assert attachment.name == "notes.md"
    assert attachment.mime_type == "text/markdown"
    assert session.attachments == [attachment]


def test_reset_clears_everything(session, sample_attachment):
    session.add_attachment(sample_attachment)
    session.generate()

    session.reset()

    for section in INPUT_SECTIONS:
        assert getattr(session.inputs, section.field) == ""
    assert session.attachments == []
    assert session.result is None
    assert session.error is None
    assert not session.has_content()


def test_new_analysis_keeps_inputs(session, sample_inputs):
    session.generate()
    session.new_analysis()
    assert session.result is None
    assert session.inputs == sample_inputs
