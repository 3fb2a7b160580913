"""プロファイルの構造バリデーションロジック。"""

from collections.abc import Callable

from profilekit.models.profile import (
    RECOMMENDED_FIELDS,
    REQUIRED_FIELDS,
    ControlsLayout,
    FormatKind,
    ProfileMetadata,
    ProfileStructure,
)
from profilekit.models.validation import Diagnostic, ValidationResult

LEGACY_METADATA_WARNING = "The use of `metadata.rb` is deprecated. Use `inspec.yml`."
METADATA_OK_MESSAGE = "Metadata OK."
LEGACY_TEST_DIR_WARNING = "Profile uses deprecated `test` directory, rename it to `controls`"
NO_RULES_WARNING = "No controls or tests were defined."


def missing_field_message(field: str) -> str:
    return f"Missing profile {field} in metadata.rb"


def check_legacy_format(fmt: FormatKind) -> list[Diagnostic]:
    """レガシー形式のメタデータを使っている場合に非推奨警告を出す。"""
    if fmt is FormatKind.LEGACY:
        return [Diagnostic(severity="warn", message=LEGACY_METADATA_WARNING)]
    return []


def check_required_field(metadata: ProfileMetadata, field: str) -> list[Diagnostic]:
    """必須フィールドが未設定ならerrorを出す。"""
    if getattr(metadata, field) is None:
        return [Diagnostic(severity="error", message=missing_field_message(field))]
    return []


def check_recommended_field(metadata: ProfileMetadata, field: str) -> list[Diagnostic]:
    """推奨フィールドが未設定ならwarnを出す。"""
    if getattr(metadata, field) is None:
        return [Diagnostic(severity="warn", message=missing_field_message(field))]
    return []


def check_metadata(metadata: ProfileMetadata) -> list[Diagnostic]:
    """メタデータのフィールドを順にチェックする。

    すべて設定済みの場合は個別の結果の代わりに "Metadata OK." を1件だけ返す。
    """
    results: list[Diagnostic] = []
    for field in REQUIRED_FIELDS:
        results.extend(check_required_field(metadata, field))
    for field in RECOMMENDED_FIELDS:
        results.extend(check_recommended_field(metadata, field))
    if not results:
        results.append(Diagnostic(severity="info", message=METADATA_OK_MESSAGE))
    return results


def check_controls_layout(structure: ProfileStructure) -> list[Diagnostic]:
    """非推奨の ``test`` ディレクトリからルールを取得している場合に警告を出す。"""
    if structure.layout is ControlsLayout.TEST:
        return [Diagnostic(severity="warn", message=LEGACY_TEST_DIR_WARNING)]
    return []


def check_rule_count(structure: ProfileStructure) -> list[Diagnostic]:
    """ルールが1件も無い場合に警告を出す。"""
    if structure.rule_count == 0:
        return [Diagnostic(severity="warn", message=NO_RULES_WARNING)]
    return []


class ProfileValidator:
    """固定順のチェックでプロファイルを検証する。

    途中でerrorが出ても打ち切らず、すべてのチェックを実行する。
    """

    def __init__(self) -> None:
        self._checks: list[Callable[[ProfileMetadata, FormatKind, ProfileStructure], list[Diagnostic]]] = [
            lambda metadata, fmt, structure: check_legacy_format(fmt),
            lambda metadata, fmt, structure: check_metadata(metadata),
            lambda metadata, fmt, structure: check_controls_layout(structure),
            lambda metadata, fmt, structure: check_rule_count(structure),
        ]

    def validate(
        self,
        metadata: ProfileMetadata,
        fmt: FormatKind,
        structure: ProfileStructure,
    ) -> ValidationResult:
        """メタデータと構成を検証する。

        Args:
            metadata: 解決済みのメタデータ。
            fmt: メタデータの取得元形式。
            structure: ディレクトリ構成のスキャン結果。

        Returns:
            全診断結果。入力は変更しない。
        """
        diagnostics: list[Diagnostic] = []
        for check in self._checks:
            diagnostics.extend(check(metadata, fmt, structure))
        return ValidationResult(diagnostics=diagnostics)
