"""プロファイルメタデータの解決（inspec.yml / metadata.rb）。"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from profilekit.models.errors import LoadError, ParseError
from profilekit.models.profile import FormatKind, ProfileMetadata
from profilekit.resolvers.legacy import LEGACY_METADATA_FILE, MAX_SOURCE_BYTES, parse_legacy_metadata

logger = logging.getLogger(__name__)

MODERN_METADATA_FILE = "inspec.yml"


_METADATA_FIELDS = frozenset(ProfileMetadata.model_fields)
_LIST_FIELDS = ("supports", "depends")


class ResolvedMetadata(BaseModel):
    """メタデータ解決の結果。"""

    model_config = {"frozen": True}

    metadata: ProfileMetadata
    format: FormatKind


def detect_format(root: Path) -> FormatKind:
    """メタデータファイルの有無から形式を判定する。両方ある場合はModernを優先する。"""
    if (root / MODERN_METADATA_FILE).is_file():
        return FormatKind.MODERN
    if (root / LEGACY_METADATA_FILE).is_file():
        return FormatKind.LEGACY
    return FormatKind.NONE


def _read_text(path: Path) -> str:
    # 先頭のBOMは読み飛ばす
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(str(path), str(e)) from e


def _read_legacy_source(path: Path) -> str:
    """サイズ上限を確認してから metadata.rb を読み込む。"""
    try:
        size = path.stat().st_size
    except OSError as e:
        raise LoadError(str(path), str(e)) from e
    if size > MAX_SOURCE_BYTES:
        with open(path, encoding="utf-8-sig", errors="replace") as f:
            head = f.read(200)
        raise ParseError(LEGACY_METADATA_FILE, head, f"file exceeds {MAX_SOURCE_BYTES} bytes")
    return _read_text(path)


def _scalar_sources(node: yaml.Node | None) -> dict[str, str]:
    """トップレベルのマッピングから、スカラー値の記述どおりの文字列を取り出す。"""
    sources: dict[str, str] = {}
    if isinstance(node, yaml.MappingNode):
        for key_node, value_node in node.value:
            if isinstance(key_node, yaml.ScalarNode) and isinstance(value_node, yaml.ScalarNode):
                sources[key_node.value] = value_node.value
    return sources


def _normalize_modern(data: dict[str, Any], sources: dict[str, str]) -> dict[str, Any]:
    """inspec.yml の内容をProfileMetadataのフィールドに揃える。

    文字列フィールドの数値・真偽値はYAMLの記述どおりの文字列とする（``1.10`` は ``"1.10"``）。
    """
    fields: dict[str, Any] = {}
    for key, value in data.items():
        if key not in _METADATA_FIELDS or value is None:
            continue
        if key in _LIST_FIELDS:
            fields[key] = value if isinstance(value, list) else [value]
        elif not isinstance(value, str) and key in sources:
            fields[key] = sources[key]
        else:
            fields[key] = value
    return fields


def parse_modern_metadata(source: str) -> ProfileMetadata:
    """inspec.yml の内容を解釈して ProfileMetadata を返す。

    Raises:
        ParseError: YAMLとして不正、またはトップレベルがマッピングでない場合。
    """
    try:
        data = yaml.safe_load(source)
        node = yaml.compose(source, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise ParseError(MODERN_METADATA_FILE, source, str(e)) from e

    if data is None:
        return ProfileMetadata()
    if not isinstance(data, dict):
        raise ParseError(MODERN_METADATA_FILE, source, "top level must be a mapping")

    try:
        return ProfileMetadata(**_normalize_modern(data, _scalar_sources(node)))
    except ValidationError as e:
        raise ParseError(MODERN_METADATA_FILE, source, str(e)) from e


def resolve_metadata(root: Path) -> ResolvedMetadata:
    """プロファイルのメタデータを解決する。

    レガシー形式の非推奨警告は FormatKind をもとにバリデータが出力する。

    Args:
        root: プロファイルのルートディレクトリ。

    Returns:
        正規化されたメタデータと形式。

    Raises:
        ParseError: メタデータファイルが不正な場合。
        LoadError: メタデータファイルを読み込めない場合。
    """
    fmt = detect_format(root)
    logger.debug("Resolved metadata format for %s: %s", root, fmt.value)

    if fmt is FormatKind.MODERN:
        metadata = parse_modern_metadata(_read_text(root / MODERN_METADATA_FILE))
    elif fmt is FormatKind.LEGACY:
        metadata = parse_legacy_metadata(_read_legacy_source(root / LEGACY_METADATA_FILE))
    else:
        metadata = ProfileMetadata()
    return ResolvedMetadata(metadata=metadata, format=fmt)
