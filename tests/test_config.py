"""
Tests for tracker settings and the config loader.
"""

import json

import pytest
from pydantic import ValidationError

from taxrollwatch.domain.change_types import StatusCode
from taxrollwatch.domain.config import TrackerSettings
from taxrollwatch.domain.errors import ConfigError
from taxrollwatch.infrastructure.config_loader import ConfigLoader, strip_json_comments


class TestTrackerSettings:
    """Test cases for the TrackerSettings model."""

    def test_defaults(self):
        settings = TrackerSettings()

        assert settings.identifier_fields[0][0] == "CAN"
        assert settings.status_fields[0] == "LEGALSTATUS"
        assert settings.exhaustive_status_scan is False
        assert settings.duplicate_identifiers == "last_wins"
        assert settings.raise_on_duplicates is False
        assert settings.foreclosure_statuses == [StatusCode.JUDGMENT]

    def test_blank_names_dropped(self):
        settings = TrackerSettings(
            identifier_fields=[["Folio", " "], [""]],
            status_fields=["Lien", ""],
        )

        assert settings.identifier_fields == [["Folio"]]
        assert settings.status_fields == ["Lien"]

    def test_invalid_duplicate_policy(self):
        with pytest.raises(ValidationError):
            TrackerSettings(duplicate_identifiers="first_wins")

    def test_none_cannot_mark_foreclosure(self):
        with pytest.raises(ValidationError):
            TrackerSettings(foreclosure_statuses=["None"])

    def test_foreclosure_statuses_parse_labels(self):
        settings = TrackerSettings(foreclosure_statuses=["Judgment", "Active"])
        assert settings.foreclosure_statuses == [StatusCode.JUDGMENT, StatusCode.ACTIVE]

    def test_error_policy(self):
        assert TrackerSettings(duplicate_identifiers="error").raise_on_duplicates is True

    def test_builds_configured_policies(self):
        settings = TrackerSettings(
            identifier_fields=[["Folio"]],
            first_column_fallback=False,
            status_fields=["Lien"],
            exhaustive_status_scan=True,
        )

        resolver = settings.build_identity_resolver()
        normalizer = settings.build_status_normalizer()

        assert resolver.identify({"Other": "x", "Folio": "F1"}) == "F1"
        assert resolver.identify({"Other": "x"}) == ""
        assert normalizer.extract_status({"Lien": "J"}) == StatusCode.JUDGMENT
        assert normalizer.extract_status({"Code": "A"}) == StatusCode.ACTIVE


class TestConfigLoader:
    """Test cases for ConfigLoader."""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = ConfigLoader(tmp_path).load_settings()
        assert settings == TrackerSettings()

    def test_load_json(self, tmp_path):
        (tmp_path / "tracker_config.json").write_text(
            json.dumps({"exhaustive_status_scan": True, "duplicate_identifiers": "error"}),
            encoding="utf-8",
        )

        settings = ConfigLoader(tmp_path).load_settings()

        assert settings.exhaustive_status_scan is True
        assert settings.raise_on_duplicates is True

    def test_load_jsonc_with_comments(self, tmp_path):
        (tmp_path / "tracker_config.jsonc").write_text(
            '{\n'
            '  // county renamed the column in 2023\n'
            '  "status_fields": ["LEGALSTATUS", "Lien // State"],\n'
            '  /* keep the default db */\n'
            '  "sheet_name": "Roll"\n'
            '}\n',
            encoding="utf-8",
        )

        settings = ConfigLoader(tmp_path).load_settings()

        assert settings.status_fields == ["LEGALSTATUS", "Lien // State"]
        assert settings.sheet_name == "Roll"

    def test_json_preferred_over_jsonc(self, tmp_path):
        (tmp_path / "tracker_config.json").write_text('{"sheet_name": "json"}', encoding="utf-8")
        (tmp_path / "tracker_config.jsonc").write_text('{"sheet_name": "jsonc"}', encoding="utf-8")

        assert ConfigLoader(tmp_path).load_settings().sheet_name == "json"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text('{"detect_foreclosures": false}', encoding="utf-8")

        settings = ConfigLoader(tmp_path / "unused").load_settings(path)

        assert settings.detect_foreclosures is False

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigLoader(tmp_path).load_settings(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        (tmp_path / "tracker_config.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError):
            ConfigLoader(tmp_path).load_settings()

    def test_invalid_settings(self, tmp_path):
        (tmp_path / "tracker_config.json").write_text(
            '{"duplicate_identifiers": "sometimes"}', encoding="utf-8"
        )

        with pytest.raises(ConfigError):
            ConfigLoader(tmp_path).load_settings()

    def test_non_object(self, tmp_path):
        (tmp_path / "tracker_config.json").write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ConfigError):
            ConfigLoader(tmp_path).load_settings()


class TestStripJsonComments:
    """JSONC comment removal."""

    def test_escaped_quote_in_string(self):
        content = '{"a": "say \\"hi\\" // not a comment"} // trailing'
        assert json.loads(strip_json_comments(content)) == {"a": 'say "hi" // not a comment'}

    def test_unterminated_block_comment(self):
        with pytest.raises(ValueError):
            strip_json_comments('{"a": 1} /* oops')
