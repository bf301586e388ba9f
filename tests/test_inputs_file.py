"""Tests for inputs files and attachments."""

import base64
import json

import pytest
import yaml

from impactlens.core.attachments import ACCEPTED_MIME_TYPES, read_attachment
from impactlens.core.errors import InputValidationError
from impactlens.core.inputs_file import dump_inputs, load_inputs
from impactlens.schemas.inputs import DEFAULT_INPUTS


class TestInputsFile:
    """Test loading and saving inputs."""

    def test_yaml_roundtrip_keeps_multiline_text(self, tmp_path):
        path = tmp_path / "inputs.yaml"
        dump_inputs(DEFAULT_INPUTS, path)

        content = path.read_text(encoding="utf-8")
        assert "workTraces: |" in content
        assert load_inputs(path) == DEFAULT_INPUTS

    def test_json_inputs(self, tmp_path):
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps({"identity": "Designer", "nonNegotiables": "No crunch"}), encoding="utf-8")

        inputs = load_inputs(path)

        assert inputs.identity == "Designer"
        assert inputs.non_negotiables == "No crunch"
        assert inputs.friction == ""

    def test_yaml_scalars_stay_text(self, tmp_path):
        path = tmp_path / "inputs.yaml"
        path.write_text("nonNegotiables: No\npreferences: yes\nbackground: 2019\nidentity: 3.5\n", encoding="utf-8")

        inputs = load_inputs(path)

        assert inputs.non_negotiables == "No"
        assert inputs.preferences == "yes"
        assert inputs.background == "2019"
        assert inputs.identity == "3.5"

    def test_empty_file_gives_empty_inputs(self, tmp_path):
        path = tmp_path / "inputs.yaml"
        path.write_text("", encoding="utf-8")
        assert not load_inputs(path).has_content()

    def test_unknown_section(self, tmp_path):
        path = tmp_path / "inputs.yaml"
        path.write_text(yaml.safe_dump({"hobbies": "chess"}), encoding="utf-8")

        with pytest.raises(InputValidationError, match="hobbies"):
            load_inputs(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "inputs.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(InputValidationError, match="mapping"):
            load_inputs(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "inputs.json"
        path.write_text("{broken", encoding="utf-8")

        with pytest.raises(InputValidationError, match="Could not parse"):
            load_inputs(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputValidationError, match="Could not read"):
            load_inputs(tmp_path / "nope.yaml")


class TestAttachments:
    """Test reading attachments."""

    def test_reads_and_encodes(self, tmp_path):
        path = tmp_path / "Photo.JPG"
        path.write_bytes(b"\xff\xd8\xff")

        attachment = read_attachment(path)

        assert attachment.name == "Photo.JPG"
        assert attachment.mime_type == "image/jpeg"
        assert base64.b64decode(attachment.data) == b"\xff\xd8\xff"

    def test_ids_are_unique(self, tmp_path):
        path = tmp_path / "cv.txt"
        path.write_text("cv", encoding="utf-8")
        assert read_attachment(path).id != read_attachment(path).id

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "archive.zip"
        path.write_bytes(b"PK")

        with pytest.raises(InputValidationError, match="Unsupported attachment type"):
            read_attachment(path)

    def test_accepted_extensions(self):
        assert set(ACCEPTED_MIME_TYPES) == {".pdf", ".txt", ".md", ".doc", ".docx", ".png", ".jpg", ".jpeg"}
