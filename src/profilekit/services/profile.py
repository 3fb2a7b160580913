"""プロファイルの読み込み・検証・要約を行うサービス。"""

import logging
from pathlib import Path
from typing import Any, Protocol

from profilekit.config import ProfileConfig
from profilekit.models.profile import FormatKind, ProfileMetadata, ProfileStructure, ProfileSummary
from profilekit.models.validation import Diagnostic, ValidationResult
from profilekit.resolvers.metadata import ResolvedMetadata, resolve_metadata
from profilekit.resolvers.structure import ensure_profile_root, scan_structure
from profilekit.validators.profile import ProfileValidator

logger = logging.getLogger(__name__)

# 診断の既定の出力先
DEFAULT_SINK = logging.getLogger("profilekit.check")

# 重要度ごとの出力メソッド名
_SINK_METHODS = {"info": "info", "warn": "warning", "error": "error"}


class DiagnosticSink(Protocol):
    """診断の出力先。logging.Loggerと互換。"""

    def info(self, msg: str, /) -> Any: ...

    def warning(self, msg: str, /) -> Any: ...

    def error(self, msg: str, /) -> Any: ...


class DiagnosticCollector:
    """診断をリストに収集する出力先。"""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def info(self, msg: str) -> None:
        self.diagnostics.append(Diagnostic(severity="info", message=msg))

    def warning(self, msg: str) -> None:
        self.diagnostics.append(Diagnostic(severity="warn", message=msg))

    def error(self, msg: str) -> None:
        self.diagnostics.append(Diagnostic(severity="error", message=msg))


def checking_message(path: str) -> str:
    return f"Checking profile in {path}"


class Profile:
    """読み込み済みのプロファイル。

    メタデータと構成はロード時に一度だけ構築され、以降は読み取り専用。
    check() は何度呼び出しても同じ結果を返す。
    """

    def __init__(
        self,
        path: str,
        resolved: ResolvedMetadata,
        structure: ProfileStructure,
        config: ProfileConfig | None = None,
        validator: ProfileValidator | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self._path = path
        self._resolved = resolved
        self._structure = structure
        self._config = config or ProfileConfig()
        self._validator = validator or ProfileValidator()
        self._sink: DiagnosticSink = sink if sink is not None else DEFAULT_SINK

    @property
    def path(self) -> str:
        return self._path

    @property
    def metadata(self) -> ProfileMetadata:
        return self._resolved.metadata

    @property
    def format(self) -> FormatKind:
        return self._resolved.format

    @property
    def structure(self) -> ProfileStructure:
        return self._structure

    @property
    def profile_id(self) -> str:
        """設定で上書きされたID、メタデータのname、ディレクトリ名の順で決まるID。"""
        if self._config.id:
            return self._config.id
        if self.metadata.name:
            return self.metadata.name
        return Path(self._path).resolve().name

    def check(self) -> ValidationResult:
        """プロファイルを検証し、全診断を出力先に順番どおり出力する。

        Returns:
            先頭に "Checking profile in {path}" を含む全診断結果。
        """
        validated = self._validator.validate(self.metadata, self.format, self._structure)
        diagnostics = [Diagnostic(severity="info", message=checking_message(self._path))]
        diagnostics.extend(validated.diagnostics)
        result = ValidationResult(diagnostics=diagnostics)

        for diagnostic in result.diagnostics:
            emit = getattr(self._sink, _SINK_METHODS[diagnostic.severity])
            emit(diagnostic.message)
        return result

    def info(self) -> ProfileSummary:
        """エクスポート・パッケージング向けの要約を返す。check()の実行有無に依存しない。"""
        return ProfileSummary.build(self.metadata, self._structure.rules)

    @property
    def params(self) -> dict[str, Any]:
        """要約を辞書として返す。未設定フィールドはNoneとなる。"""
        return self.info().model_dump()


def load_profile(
    path: str | Path,
    config: ProfileConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> Profile:
    """プロファイルを読み込む。

    Args:
        path: プロファイルのルートディレクトリ。
        config: 読み込み設定。Noneの場合はデフォルト設定を使用。
        sink: check() の診断の出力先。Noneの場合は DEFAULT_SINK。

    Returns:
        読み込み済みのプロファイル。

    Raises:
        LoadError: ルートディレクトリが存在しない、または読み込めない場合。
        ParseError: メタデータファイルが不正な場合。
    """
    root = Path(path)
    ensure_profile_root(root)
    resolved = resolve_metadata(root)
    structure = scan_structure(root)
    logger.debug("Loaded profile %s (format=%s, rules=%d)", root, resolved.format.value, structure.rule_count)
    return Profile(str(path), resolved, structure, config=config, sink=sink)
