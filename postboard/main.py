from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from postboard.core.config import settings
from postboard.core.database import Database
from postboard.core.exceptions import ServiceException
from postboard.core.logger import get_logger, setup_logging
from postboard.core.response.handlers import (
    global_exception_handler,
    service_exception_handler,
    validation_exception_handler,
)

# Import routers from apps
from postboard.apps.posts import build_post_router

logger = get_logger("main")


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the application and wire database, repositories, services and routers."""
    setup_logging()
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: create tables and check the connection
        await database.create_all()
        await database.connect()
        yield
        logger.info("Shutting down...")
        await database.disconnect()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_INFO,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )
    app.state.database = database

    # Any origin may call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with health check."""
        return {"message": "Server is running", "status": "healthy", "version": settings.PROJECT_VERSION}

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "message": "Service is running normally"}

    app.include_router(build_post_router(database))

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "postboard.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
