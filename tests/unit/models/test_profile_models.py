"""プロファイル関連データモデルのユニットテスト。"""

import json

import pytest
import yaml
from pydantic import ValidationError

from profilekit.models.profile import ProfileMetadata, ProfileStructure, ProfileSummary, RuleSummary
from profilekit.models.validation import Diagnostic, ValidationResult


class TestProfileMetadata:
    def test_defaults_are_absent(self) -> None:
        metadata = ProfileMetadata()
        assert all(value is None for value in metadata.model_dump().values())

    def test_empty_string_is_distinct_from_absent(self) -> None:
        assert ProfileMetadata(name="").name == ""

    def test_is_immutable(self) -> None:
        metadata = ProfileMetadata(name="x")
        with pytest.raises(ValidationError):
            metadata.name = "y"  # type: ignore[misc]


class TestProfileStructure:
    def test_rule_count_must_not_be_negative(self) -> None:
        with pytest.raises(ValidationError):
            ProfileStructure(rule_count=-1)


class TestProfileSummary:
    def test_absent_fields_are_omitted(self) -> None:
        summary = ProfileSummary.build(ProfileMetadata(name="x", title=""), {})
        data = json.loads(summary.to_json())
        assert data == {"name": "x", "title": "", "rules": {}}

    def test_round_trip_keeps_absent_fields_absent(self) -> None:
        summary = ProfileSummary.build(
            ProfileMetadata(name="x", supports=[{"os-family": "linux"}], depends=["base"]),
            {"r-1": RuleSummary(title="T", impact=0.5, source="controls/a.rb"), "r-2": RuleSummary()},
        )
        restored = ProfileSummary.from_json(summary.to_json(pretty=False))
        assert restored == summary
        assert restored.version is None
        assert restored.rules["r-2"].title is None

    def test_compact_json_has_no_newlines(self) -> None:
        assert "\n" not in ProfileSummary.build(ProfileMetadata(name="x"), {}).to_json(pretty=False)

    def test_yaml_export(self) -> None:
        summary = ProfileSummary.build(ProfileMetadata(name="x", version="1.0.0"), {"r": RuleSummary(title="T")})
        data = yaml.safe_load(summary.to_yaml())
        assert data == {"name": "x", "version": "1.0.0", "rules": {"r": {"title": "T"}}}


class TestValidationResult:
    def test_passed_without_errors(self) -> None:
        result = ValidationResult(diagnostics=[Diagnostic(severity="warn", message="w")])
        assert result.passed is True

    def test_failed_with_error(self) -> None:
        result = ValidationResult(
            diagnostics=[Diagnostic(severity="info", message="i"), Diagnostic(severity="error", message="e")]
        )
        assert result.passed is False
        assert result.to_dict() == {
            "passed": False,
            "diagnostics": [{"severity": "info", "message": "i"}, {"severity": "error", "message": "e"}],
        }

    def test_unknown_severity_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Diagnostic(severity="fatal", message="x")  # type: ignore[arg-type]
