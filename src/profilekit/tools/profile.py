"""プロファイル検証・要約・アーカイブのMCPツール定義。"""

import logging
from pathlib import Path
from typing import Any, Literal

from fastmcp import FastMCP

from profilekit.config import ProfileConfig
from profilekit.models.errors import ProfileKitError
from profilekit.services.archive import ProfileArchiver
from profilekit.services.profile import DiagnosticCollector, load_profile

logger = logging.getLogger(__name__)


def register_profile_tools(mcp: FastMCP, archiver: ProfileArchiver) -> None:
    """プロファイル関連のMCPツールを登録する。"""

    @mcp.tool()
    async def check_profile(path: str) -> dict[str, Any]:
        """プロファイルを検証する。

        メタデータの必須項目、ディレクトリ構成、コントロールの有無を検証し、
        診断結果を出力順どおりに返します。

        Args:
            path: プロファイルのルートディレクトリ。
        """
        collector = DiagnosticCollector()
        try:
            profile = load_profile(path, sink=collector)
            return profile.check().to_dict()
        except ProfileKitError as e:
            logger.warning("check_profile failed for %s: %s", path, e)
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def profile_info(path: str, profile_id: str | None = None) -> dict[str, Any]:
        """プロファイルの要約を返す。

        メタデータとコントロール一覧を返します。検証は行いません。

        Args:
            path: プロファイルのルートディレクトリ。
            profile_id: プロファイルIDの上書き。
        """
        try:
            profile = load_profile(path, ProfileConfig(id=profile_id))
            return {"id": profile.profile_id, **profile.info().model_dump(mode="json", exclude_none=True)}
        except ProfileKitError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def archive_profile(
        path: str,
        output: str | None = None,
        archive_format: Literal["tar", "zip"] = "tar",
        overwrite: bool = False,
    ) -> dict[str, Any]:
        """プロファイルを配布用アーカイブにまとめる。

        検証に合格しないプロファイルはアーカイブしません。

        Args:
            path: プロファイルのルートディレクトリ。
            output: 出力先パス。省略時はカレントディレクトリに <id>.tar.gz / <id>.zip。
            archive_format: "tar" または "zip"。
            overwrite: 既存ファイルを上書きするか。
        """
        collector = DiagnosticCollector()
        try:
            profile = load_profile(path, sink=collector)
            result = profile.check()
            if not result.passed:
                return {
                    "error": "ValidationFailed",
                    "message": "Profile check failed",
                    "diagnostics": [d.model_dump() for d in collector.diagnostics],
                }
            archive_path = archiver.archive(
                profile,
                output=Path(output) if output else None,
                fmt=archive_format,
                overwrite=overwrite,
            )
            return {"archive": str(archive_path)}
        except ProfileKitError as e:
            return {"error": type(e).__name__, "message": str(e)}
