"""プロファイル関連のデータモデル。"""

from enum import Enum
from typing import Any

import yaml
from pydantic import BaseModel, Field

# メタデータのうち必須チェック対象となるフィールド（チェック順）
REQUIRED_FIELDS: tuple[str, ...] = ("name", "version")
RECOMMENDED_FIELDS: tuple[str, ...] = ("title", "summary", "maintainer", "copyright")


class FormatKind(str, Enum):
    """メタデータの取得元形式。ロード時に一度だけ決定する。"""

    MODERN = "modern"
    LEGACY = "legacy"
    NONE = "none"


class ControlsLayout(str, Enum):
    """コントロールファイルを取得したディレクトリ規約。"""

    CONTROLS = "controls"
    TEST = "test"
    NONE = "none"


class ProfileMetadata(BaseModel):
    """正規化済みのプロファイルメタデータ。

    未設定のフィールドはNoneで表し、空文字列とは区別する。
    """

    model_config = {"frozen": True}

    name: str | None = None
    version: str | None = None
    title: str | None = None
    summary: str | None = None
    maintainer: str | None = None
    copyright: str | None = None
    copyright_email: str | None = None
    license: str | None = None
    supports: list[str | dict[str, Any]] | None = None
    depends: list[str | dict[str, Any]] | None = None


class RuleSummary(BaseModel):
    """コントロール1件の概要。"""

    model_config = {"frozen": True}

    title: str | None = None
    desc: str | None = None
    impact: float | None = None
    source: str | None = None


class ProfileStructure(BaseModel):
    """プロファイルのディレクトリ構成のスキャン結果。"""

    model_config = {"frozen": True}

    controls_dir_present: bool = False
    legacy_test_dir_present: bool = False
    layout: ControlsLayout = ControlsLayout.NONE
    rule_files: list[str] = Field(default_factory=list)
    rules: dict[str, RuleSummary] = Field(default_factory=dict)
    rule_count: int = Field(default=0, ge=0)


class ProfileSummary(BaseModel):
    """エクスポート・パッケージング向けのプロファイル要約。"""

    model_config = {"frozen": True}

    name: str | None = None
    version: str | None = None
    title: str | None = None
    summary: str | None = None
    maintainer: str | None = None
    copyright: str | None = None
    copyright_email: str | None = None
    license: str | None = None
    supports: list[str | dict[str, Any]] | None = None
    depends: list[str | dict[str, Any]] | None = None
    rules: dict[str, RuleSummary] = Field(default_factory=dict)

    @classmethod
    def build(cls, metadata: ProfileMetadata, rules: dict[str, RuleSummary]) -> "ProfileSummary":
        """メタデータとルール一覧から要約を組み立てる。"""
        return cls(**metadata.model_dump(), rules=rules)

    def to_json(self, pretty: bool = True) -> str:
        """JSON文字列に変換する。未設定フィールドは出力しない。"""
        return self.model_dump_json(indent=2 if pretty else None, exclude_none=True)

    def to_yaml(self) -> str:
        """YAML文字列に変換する。未設定フィールドは出力しない。"""
        return yaml.safe_dump(
            self.model_dump(mode="json", exclude_none=True),
            sort_keys=False,
            allow_unicode=True,
        )

    @classmethod
    def from_json(cls, text: str) -> "ProfileSummary":
        """to_jsonの出力から要約を復元する。"""
        return cls.model_validate_json(text)
