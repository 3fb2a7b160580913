"""メタデータ解決のユニットテスト。"""

from collections.abc import Callable
from pathlib import Path

import pytest

from profilekit.models.errors import ParseError
from profilekit.models.profile import FormatKind
from profilekit.resolvers.legacy import MAX_SOURCE_BYTES
from profilekit.resolvers.metadata import (
    ResolvedMetadata,
    parse_modern_metadata,
    resolve_metadata,
)


class TestResolveMetadata:
    def test_no_metadata_source(self, make_profile: Callable[..., Path]) -> None:
        root = make_profile()
        resolved = resolve_metadata(root)
        assert resolved.format is FormatKind.NONE
        assert resolved.metadata.name is None

    def test_modern_metadata(self, make_profile: Callable[..., Path]) -> None:
        root = make_profile(files={"inspec.yml": "name: modern\nversion: 1.0.0\n"})
        resolved = resolve_metadata(root)
        assert resolved.format is FormatKind.MODERN
        assert resolved.metadata.name == "modern"
        assert resolved.metadata.version == "1.0.0"

    def test_legacy_metadata(self, make_profile: Callable[..., Path]) -> None:
        root = make_profile(files={"metadata.rb": "name 'legacy'\n"})
        resolved = resolve_metadata(root)
        assert resolved.format is FormatKind.LEGACY
        assert resolved.metadata.name == "legacy"

    def test_result_carries_only_metadata_and_format(self) -> None:
        # 非推奨警告はバリデータが FormatKind から出力する
        assert set(ResolvedMetadata.model_fields) == {"metadata", "format"}

    def test_modern_wins_silently_when_both_exist(self, make_profile: Callable[..., Path]) -> None:
        root = make_profile(files={"inspec.yml": "name: modern\n", "metadata.rb": "name 'legacy'\n"})
        resolved = resolve_metadata(root)
        assert resolved.format is FormatKind.MODERN
        assert resolved.metadata.name == "modern"

    def test_malformed_legacy_metadata_raises(self, make_profile: Callable[..., Path]) -> None:
        root = make_profile(files={"metadata.rb": "eval(File.read('x'))\n"})
        with pytest.raises(ParseError):
            resolve_metadata(root)

    def test_legacy_metadata_with_bom(self, make_profile: Callable[..., Path]) -> None:
        root = make_profile()
        (root / "metadata.rb").write_bytes(b"\xef\xbb\xbfname 'bom'\nversion '1.0.0'\n")
        resolved = resolve_metadata(root)
        assert resolved.metadata.name == "bom"
        assert resolved.metadata.version == "1.0.0"

    def test_modern_metadata_with_bom(self, make_profile: Callable[..., Path]) -> None:
        root = make_profile()
        (root / "inspec.yml").write_bytes(b"\xef\xbb\xbfname: bom\n")
        assert resolve_metadata(root).metadata.name == "bom"

    def test_oversized_legacy_metadata_is_rejected_before_reading(
        self, make_profile: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = make_profile()
        line = "title 'padding'\n"
        (root / "metadata.rb").write_text(line * (MAX_SOURCE_BYTES // len(line) + 1), encoding="utf-8")

        def fail_read_text(self: Path, *args: object, **kwargs: object) -> str:
            raise AssertionError(f"{self} should not be read in full")

        monkeypatch.setattr(Path, "read_text", fail_read_text)
        with pytest.raises(ParseError) as exc_info:
            resolve_metadata(root)
        assert "exceeds" in exc_info.value.reason
        assert len(exc_info.value.content) <= 200


class TestParseModernMetadata:
    def test_empty_file(self) -> None:
        metadata = parse_modern_metadata("")
        assert metadata.name is None

    def test_version_number_is_normalized_to_string(self) -> None:
        metadata = parse_modern_metadata("version: 1.2\n")
        assert metadata.version == "1.2"

    def test_version_keeps_source_text(self) -> None:
        assert parse_modern_metadata("version: 1.10\n").version == "1.10"
        assert parse_modern_metadata("version: 2.0\n").version == "2.0"
        assert parse_modern_metadata("version: 007\n").version == "007"

    def test_boolean_scalar_keeps_source_text(self) -> None:
        metadata = parse_modern_metadata("title: yes\nlicense: Off\n")
        assert metadata.title == "yes"
        assert metadata.license == "Off"

    def test_quoted_version_is_unchanged(self) -> None:
        assert parse_modern_metadata("version: '1.10'\n").version == "1.10"

    def test_scalar_supports_becomes_list(self) -> None:
        metadata = parse_modern_metadata("supports: linux\n")
        assert metadata.supports == ["linux"]

    def test_unknown_keys_are_ignored(self) -> None:
        metadata = parse_modern_metadata("name: x\ninspec_version: '>= 1.0'\n")
        assert metadata.name == "x"

    def test_null_value_stays_absent(self) -> None:
        metadata = parse_modern_metadata("name: x\ntitle:\n")
        assert metadata.title is None

    def test_malformed_yaml(self) -> None:
        source = "name: [unclosed\n"
        with pytest.raises(ParseError) as exc_info:
            parse_modern_metadata(source)
        assert exc_info.value.content == source

    def test_non_mapping_top_level(self) -> None:
        with pytest.raises(ParseError):
            parse_modern_metadata("- a\n- b\n")
