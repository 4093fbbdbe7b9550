"""Main FastMCP server — mounts all sub-servers."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from . import tracing
from .client import GeminiClient
from .tools.infra import infra_server
from .tools.study import study_server

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(server: FastMCP):
    """Startup/shutdown hook — tracing setup and Gemini client teardown."""
    tracing.setup()
    yield {}
    tracing.shutdown()
    closed = await GeminiClient.close_all()
    logger.info("Lifespan shutdown: closed %d client(s)", closed)


app = FastMCP(
    "study-buddy",
    instructions=(
        "Study buddy — turn a photo of notes or typed notes into a summary, key terms "
        "and a multiple-choice quiz. Start with study_start_session, provide input, "
        "then study_submit."
    ),
    lifespan=_lifespan,
)

app.mount(study_server)
app.mount(infra_server)


def main() -> None:
    """Entry-point for ``study-buddy-mcp`` console script."""
    app.run()


if __name__ == "__main__":
    main()
