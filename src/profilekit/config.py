"""profilekitの設定管理。

設定の優先順位は デフォルト < 環境変数 < 設定ファイル < 明示的な引数。
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings

from profilekit.models.errors import ConfigError


class ProfileConfig(BaseSettings):
    """プロファイルの読み込み・出力設定。環境変数から読み込み可能。"""

    model_config = {"env_prefix": "PROFILEKIT_", "extra": "forbid"}

    # プロファイルIDの上書き
    id: str | None = None
    # 要約・アーカイブの出力先
    output: Path | None = None
    archive_format: Literal["tar", "zip"] = "tar"
    overwrite: bool = False
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"



class ServerConfig(BaseSettings):
    """MCPサーバー設定。環境変数から読み込み可能。"""

    model_config = {"env_prefix": "PROFILEKIT_SERVER_"}

    host: str = "0.0.0.0"
    port: int = 8000
    url_token: str = ""


def _read_config_file(config_file: Path) -> tuple[str, dict[str, Any]]:
    """YAML設定ファイルを読み込む。"""
    try:
        raw = config_file.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(config_file), "", str(e)) from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(str(config_file), raw, str(e)) from e

    if data is None:
        return raw, {}
    if not isinstance(data, dict):
        raise ConfigError(str(config_file), raw, "top level must be a mapping")
    return raw, data


def load_config(config_file: Path | None = None, **flags: Any) -> ProfileConfig:
    """設定ファイルと明示的な引数から ProfileConfig を組み立てる。

    Args:
        config_file: YAML形式の設定ファイル。Noneの場合は読み込まない。
        **flags: 明示的に指定された値。Noneの値は未指定として扱う。

    Returns:
        優先順位に従ってマージされた設定。

    Raises:
        ConfigError: 設定ファイルが不正、または値の検証に失敗した場合。
    """
    raw = ""
    source = "arguments"
    file_data: dict[str, Any] = {}
    if config_file is not None:
        raw, file_data = _read_config_file(config_file)
        source = str(config_file)

    overrides = {key: value for key, value in flags.items() if value is not None}
    try:
        return ProfileConfig(**{**file_data, **overrides})
    except ValidationError as e:
        raise ConfigError(source, raw or repr(overrides), str(e)) from e
