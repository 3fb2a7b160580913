"""FastMCPベースのMCPサーバーエントリポイント。"""

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from profilekit.config import ServerConfig
from profilekit.services.archive import ProfileArchiver
from profilekit.tools.profile import register_profile_tools


def create_server(config: ServerConfig | None = None) -> FastMCP:
    """profilekit MCPサーバーを作成し、ツールを登録する。

    Args:
        config: サーバー設定。Noneの場合はデフォルト設定を使用。

    Returns:
        設定済みのFastMCPインスタンス。
    """
    if config is None:
        config = ServerConfig()

    mcp = FastMCP("profilekit")

    register_profile_tools(mcp, ProfileArchiver())

    # ヘルスチェックエンドポイント
    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return mcp


def run_server(config: ServerConfig | None = None) -> None:
    """streamable-HTTPでMCPサーバーを起動する。"""
    import uvicorn
    from starlette.middleware import Middleware

    from profilekit.middleware import TokenAuthMiddleware

    if config is None:
        config = ServerConfig()
    mcp = create_server(config)
    app = mcp.http_app(
        transport="streamable-http",
        middleware=[Middleware(TokenAuthMiddleware, url_token=config.url_token)],
    )
    uvicorn.run(app, host=config.host, port=config.port)
