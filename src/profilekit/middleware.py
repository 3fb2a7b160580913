"""MCPエンドポイントのトークン認証ミドルウェア。"""

import secrets

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp


def _request_token(request: Request) -> str:
    """Authorizationヘッダ（Bearer）またはtokenクエリパラメータからトークンを取り出す。"""
    header = request.headers.get("authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value:
        return value.strip()
    return request.query_params.get("token", "")


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """PROFILEKIT_SERVER_URL_TOKEN が設定されている場合にトークン一致を要求する。

    skip_paths に含まれるパス（既定は /health）は検証しない。
    """

    def __init__(
        self,
        app: ASGIApp,
        url_token: str = "",
        skip_paths: frozenset[str] = frozenset({"/health"}),
    ) -> None:
        super().__init__(app)
        self._url_token = url_token
        self._skip_paths = skip_paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._url_token or request.url.path in self._skip_paths:
            return await call_next(request)

        if not secrets.compare_digest(_request_token(request).encode(), self._url_token.encode()):
            return JSONResponse(
                {"error": "Unauthorized", "message": "Invalid or missing token"},
                status_code=401,
            )
        return await call_next(request)
