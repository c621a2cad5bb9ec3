from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from taskboard.api.errors import register_exception_handlers
from taskboard.api.routes import activity, auth, boards, lists, realtime, tasks
from taskboard.core.config import Settings, get_settings
from taskboard.core.logger import setup_logger
from taskboard.models.db import create_engine, create_session_factory, init_models
from taskboard.services.container import build_services


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logger(debug=settings.debug, log_file=settings.log_file)

        engine = create_engine(settings)
        await init_models(engine)
        services = build_services(create_session_factory(engine), settings)

        app.state.settings = settings
        app.state.services = services
        logger.info(f"{settings.app_name} started")
        try:
            yield
        finally:
            await services.close()
            await engine.dispose()
            logger.info(f"{settings.app_name} stopped")

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    for module in (auth, boards, lists, tasks, activity, realtime):
        app.include_router(module.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


def main():
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
