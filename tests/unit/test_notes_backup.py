"""
Unit tests for the JSON backup codec.
"""

import json
import re

import pytest

from keepfoss.models.note import Note
from keepfoss.tools.notes_backup import (
    BACKUP_MIME_TYPE,
    BackupParseError,
    export_all,
    import_all,
    read_backup,
    suggested_backup_filename,
    write_backup,
)


@pytest.fixture
def two_notes():
    return [
        Note(id=2, title="Second", content="Newer", color_index=1),
        Note(id=1, title="First", content="Older", color_index=4),
    ]


class TestExportAll:
    """Serialization of note lists."""

    def test_export_produces_array_with_stable_fields(self, two_notes):
        document = json.loads(export_all(two_notes))
        assert document == [
            {"id": 2, "title": "Second", "content": "Newer", "colorIndex": 1},
            {"id": 1, "title": "First", "content": "Older", "colorIndex": 4},
        ]

    def test_field_order_is_fixed(self, two_notes):
        document = json.loads(export_all(two_notes))
        assert list(document[0].keys()) == ["id", "title", "content", "colorIndex"]

    def test_export_is_deterministic(self, two_notes):
        assert export_all(two_notes) == export_all(list(two_notes))

    def test_export_empty_collection(self):
        assert json.loads(export_all([])) == []

    def test_export_keeps_non_ascii_text(self):
        text = export_all([Note(id=1, title="Café ☕", content="日本語")])
        assert "Café ☕" in text
        assert json.loads(text)[0]["content"] == "日本語"

    def test_compact_output(self, two_notes):
        assert "\n" not in export_all(two_notes, indent=None)


class TestImportAll:
    """Parsing of backup documents."""

    def test_import_keeps_original_ids(self, two_notes):
        assert import_all(export_all(two_notes)) == two_notes

    def test_missing_fields_get_defaults(self):
        notes = import_all('[{"title": "Only title"}, {}]')
        assert notes == [
            Note(id=0, title="Only title", content="", color_index=0),
            Note(id=0, title="", content="", color_index=0),
        ]

    def test_null_fields_get_defaults(self):
        notes = import_all('[{"id": null, "title": null, "content": "x", "colorIndex": null}]')
        assert notes == [Note(id=0, title="", content="x", color_index=0)]

    def test_unknown_fields_are_ignored(self):
        notes = import_all('[{"colorIndex": 2, "pinned": true, "title": "t", "tags": ["a"]}]')
        assert notes == [Note(title="t", color_index=2)]

    def test_out_of_range_color_is_folded(self):
        assert import_all('[{"colorIndex": 7}]')[0].color_index == 2

    def test_empty_array(self):
        assert import_all("[]") == []

    @pytest.mark.parametrize("text", [
        "not json",
        "",
        "[{\"title\": \"unterminated\"",
    ])
    def test_malformed_json_raises(self, text):
        with pytest.raises(BackupParseError):
            import_all(text)

    def test_deeply_nested_json_raises(self):
        with pytest.raises(BackupParseError):
            import_all("[" * 200000)

    @pytest.mark.parametrize("text", ['{"title": "x"}', '"text"', "42", "null"])
    def test_top_level_must_be_array(self, text):
        with pytest.raises(BackupParseError, match="array"):
            import_all(text)

    def test_elements_must_be_objects(self):
        with pytest.raises(BackupParseError, match="Record 1"):
            import_all('[{"title": "ok"}, "oops"]')

    @pytest.mark.parametrize("record", [
        '{"title": 5}',
        '{"content": ["a"]}',
        '{"colorIndex": "2"}',
        '{"colorIndex": true}',
        '{"id": 1.5}',
    ])
    def test_wrong_field_types_raise(self, record):
        with pytest.raises(BackupParseError):
            import_all(f"[{record}]")

    def test_parse_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            import_all("not json")


class TestBackupFiles:
    """File helpers and naming."""

    def test_suggested_filename_uses_millis(self):
        assert suggested_backup_filename(1700000000123) == "keepfoss_backup_1700000000123.json"

    def test_suggested_filename_defaults_to_now(self):
        assert re.fullmatch(r"keepfoss_backup_\d{13}\.json", suggested_backup_filename())

    def test_suggested_filename_prefix(self):
        assert suggested_backup_filename(1, prefix="notes") == "notes_1.json"

    def test_mime_type(self):
        assert BACKUP_MIME_TYPE == "application/json"

    def test_write_then_read(self, tmp_path, two_notes):
        path = write_backup(tmp_path / "backup.json", two_notes)
        assert path.exists()
        assert read_backup(path) == two_notes

    def test_read_missing_file_raises_os_error(self, tmp_path):
        with pytest.raises(OSError):
            read_backup(tmp_path / "missing.json")

    def test_read_non_utf8_file_is_parse_error(self, tmp_path):
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(BackupParseError):
            read_backup(path)
