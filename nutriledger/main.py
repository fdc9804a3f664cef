"""NutriLedger Server - Entry point.

Runs the dashboard API and the MCP server over HTTP.
Uses Starlette with the MCP HTTP app for maximum compatibility.
"""

import logging

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, Mount

from .config import LedgerConfig
from .shell.ledger import NutritionLedger
from .shell.mcp_server import LedgerTools, build_server


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ==================== Create ASGI App ====================


def create_app(
    config: LedgerConfig | None = None,
    ledger: NutritionLedger | None = None,
) -> Starlette:
    """Create the Starlette application with MCP at root.

    One ledger is built per app and shared by the HTTP routes and MCP tools.

    Args:
        config: Runtime configuration (defaults to environment variables)
        ledger: Pre-built ledger; hydrated from the configured store when omitted
    """
    config = config or LedgerConfig.from_env()
    if ledger is None:
        ledger = NutritionLedger.open(config.create_store())

    tools = LedgerTools(ledger, preview_count=config.preview_count)
    mcp_app = build_server(tools).streamable_http_app()

    async def health_check(request: Request) -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse({
            "status": "healthy",
            "service": "nutriledger",
            "unsaved_changes": ledger.needs_flush,
        })

    async def dashboard(request: Request) -> JSONResponse:
        """Current dashboard view."""
        view = ledger.get_dashboard_view(config.preview_count)
        data = view.model_dump(mode="json")
        data["unsaved_changes"] = ledger.needs_flush
        return JSONResponse(data)

    async def full_log(request: Request) -> JSONResponse:
        """Today's full log, most recent first."""
        entries = ledger.get_full_log()
        return JSONResponse({
            "date": ledger.day_key,
            "unsaved_changes": ledger.needs_flush,
            "entries": [e.model_dump(mode="json") for e in entries],
        })

    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/api/dashboard", dashboard, methods=["GET"]),
        Route("/api/log", full_log, methods=["GET"]),
        # Mount MCP app at root - it handles /mcp/ path internally
        Mount("/", app=mcp_app),
    ]

    # Create Starlette app with CORS
    return Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=config.cors_origins,
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            ),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )


def main() -> None:
    """Run the server."""
    config = LedgerConfig.from_env()
    app = create_app(config)

    logger.info("Starting NutriLedger server on %s:%d", config.host, config.port)

    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
