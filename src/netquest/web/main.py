from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from netquest.web import session
from netquest.web.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    session.preload()
    logger.info("Mission content loaded")
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="NetQuest", lifespan=lifespan)
    app.include_router(api_router)
    return app


app = create_app()
