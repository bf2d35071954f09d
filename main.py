import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.database import init_db
from core.logger import setup_logging
from routers import (
    auth as auth_router,
    dictionary as dictionary_router,
    quiz as quiz_router,
    words as words_router,
)
from routers.auth import security
from services.dictionary_service import DictionaryApiClient
from services.word_status_service import WordStatusCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info("%s started", settings.APP_NAME)
    yield
    app.state.word_status_cache.clear()
    logger.info("%s stopped", settings.APP_NAME)


async def unhandled_exception(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.word_status_cache = WordStatusCache(ttl_minutes=settings.WORD_STATUS_CACHE_MINUTES)
    app.state.dictionary_client = DictionaryApiClient()

    security.handle_errors(app)
    app.add_exception_handler(Exception, unhandled_exception)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router)
    app.include_router(words_router.generator_router)
    app.include_router(words_router.learned_router)
    app.include_router(dictionary_router.router)
    app.include_router(quiz_router.router)
    app.include_router(quiz_router.stats_router)

    @app.get("/status")
    async def status():
        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", reload=True, host="127.0.0.1", port=8000)
