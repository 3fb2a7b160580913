"""バリデーション関連のデータモデル。"""

from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["info", "warn", "error"]


class Diagnostic(BaseModel):
    """プロファイル検証の個別診断結果。"""

    model_config = {"frozen": True}

    severity: Severity
    message: str


class ValidationResult(BaseModel):
    """プロファイル検証の全診断結果と合否。"""

    model_config = {"frozen": True}

    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        """error診断が1件も無ければ合格。"""
        return not any(d.severity == "error" for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warn"]

    def to_dict(self) -> dict[str, object]:
        """JSON出力向けの辞書に変換する。"""
        return {
            "passed": self.passed,
            "diagnostics": [d.model_dump() for d in self.diagnostics],
        }
