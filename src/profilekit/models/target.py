"""検査対象（ターゲット）関連のデータモデル。"""

from typing import Literal
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel

from profilekit.models.errors import InvalidTargetError

Backend = Literal["local", "ssh", "winrm", "docker"]

_DEFAULT_PORTS: dict[str, int] = {"ssh": 22, "winrm": 5985}


class TargetSpec(BaseModel):
    """ターゲットURIを解釈した接続情報。実際の接続はトランスポート側が行う。"""

    model_config = {"frozen": True}

    backend: Backend
    host: str | None = None
    port: int | None = None
    user: str | None = None
    path: str | None = None


def parse_target(uri: str | None) -> TargetSpec:
    """ターゲットURIを解釈する。

    ``None`` / 空文字列 / ``local://`` はローカル、その他は
    ``ssh://user@host:port``、``winrm://user@host:port``、``docker://<container>``。

    Raises:
        InvalidTargetError: 未対応のスキーム、またはホストが無い場合。
    """
    if not uri or uri == "local://":
        return TargetSpec(backend="local")

    parts = urlsplit(uri)
    scheme = parts.scheme.lower()
    if scheme == "local":
        return TargetSpec(backend="local", path=parts.path or None)
    if scheme not in ("ssh", "winrm", "docker"):
        raise InvalidTargetError(uri, f"unsupported backend {scheme or '(none)'!r}")
    if not parts.hostname:
        raise InvalidTargetError(uri, "missing host")

    if scheme == "docker":
        return TargetSpec(backend="docker", host=parts.hostname)

    try:
        port = parts.port
    except ValueError as e:
        raise InvalidTargetError(uri, str(e)) from e
    return TargetSpec(
        backend=scheme,
        host=parts.hostname,
        port=port or _DEFAULT_PORTS[scheme],
        user=unquote(parts.username) if parts.username else None,
        path=parts.path or None,
    )
