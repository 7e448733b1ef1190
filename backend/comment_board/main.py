from typing import Optional
from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from comment_board.config import Settings, settings
from comment_board.logging import configure_logging
from comment_board.api.dependencies import get_comment_service
from comment_board.api.errors import register_exception_handlers
from comment_board.api.routes import comments
from comment_board.api.visitor_token import VisitorTokenMiddleware
from comment_board.db.database import create_engine, dispose_engine
from comment_board.db.store import StoreGateway, TableConfig
from comment_board.db.tables import comments_table
from comment_board.models.comment import Comment
from comment_board.services.comment_service import CommentService


logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    configure_logging(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_engine(app_settings)
        store = StoreGateway(
            engine,
            TableConfig(
                comments_table(app_settings.comments_table),
                exclude_deleted=app_settings.comments_hide_deleted,
            ),
            Comment,
        )
        comment_service = CommentService(store)

        if not await comment_service.health_check():
            await dispose_engine(engine)
            raise RuntimeError("Failed to connect to database")

        app.state.engine = engine
        app.state.comment_service = comment_service
        logger.info("Application startup complete")
        try:
            yield
        finally:
            app.state.comment_service = None
            await dispose_engine(engine)
            logger.info("Application shutdown complete")

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_middleware(VisitorTokenMiddleware, settings=app_settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Hello World"

    @app.get("/health")
    async def health_check(
        comment_service: CommentService = Depends(get_comment_service),
    ):
        if await comment_service.health_check():
            return {"status": "healthy", "service": "comments"}
        return JSONResponse(status_code=503, content={"status": "unhealthy"})

    app.include_router(comments.router, prefix="/api/comment", tags=["comments"])

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
