"""FastAPI application entry point.

Startup sequence: build governor -> start sweeper -> init completion client -> create assistant.
"""

import asyncio
import contextlib
import os
from contextlib import asynccontextmanager

import structlog
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from backend.agent.assistant import PortfolioAssistant
from backend.api.routes import router
from backend.core.errors import ChatError, UnexpectedChatError
from backend.core.llm_adapter import CompletionClient
from backend.core.rate_limiter import RequestGovernor
from backend.data.loader import get_data_path

load_dotenv()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("startup.begin")

    # Per-client fixed-window rate limiting for /api/chat
    governor = RequestGovernor(
        max_requests=int(os.environ.get("RATE_LIMIT_MAX", "15")),
        window_seconds=float(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", "600")),
    )
    app.state.governor = governor
    sweep_interval = float(os.environ.get("RATE_LIMIT_SWEEP_SECONDS", "1800"))
    sweeper = asyncio.create_task(governor.run_sweeper(sweep_interval))
    logger.info("startup.rate_limiter_ready", max_requests=governor.max_requests,
                window_seconds=governor.window_seconds, sweep_seconds=sweep_interval)

    llm = CompletionClient()
    healthy = llm.is_healthy()
    if not healthy:
        logger.error("startup.llm_not_configured", hint="Set OPENAI_API_KEY in .env")
    logger.info("startup.llm_initialized", healthy=healthy, model=llm.model)

    app.state.assistant = PortfolioAssistant(
        llm,
        owner=os.environ.get("PORTFOLIO_OWNER", "Alex Rivera"),
        data_path=str(get_data_path()),
    )
    logger.info("startup.complete")
    yield

    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    logger.info("shutdown.complete")


app = FastAPI(
    title="Portfolio Chat API",
    description="Conversational assistant for a personal portfolio site",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for the static portfolio site
ALLOWED_ORIGIN = os.environ.get("ALLOWED_ORIGIN", "*")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[ALLOWED_ORIGIN],
    allow_credentials=ALLOWED_ORIGIN != "*",
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError):
    """Render caller-safe errors as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Last-resort handler: log it, answer with the generic JSON error."""
    logger.error("app.unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
    fallback = UnexpectedChatError()
    return JSONResponse(status_code=fallback.status_code, content={"error": fallback.message})


app.include_router(router)


def run() -> None:
    """Serve the API with uvicorn on $PORT."""
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "3001")))


if __name__ == "__main__":
    run()
