import asyncio
from typing import Optional

import typer
import uvicorn

from postboard.core.config import settings
from postboard.core.database import Database
from postboard.core.logger import get_logger, setup_logging

app = typer.Typer(help="Management commands for the post board service.")
logger = get_logger("cli")


# ---------------------------
# Commands
# ---------------------------
@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: HOST setting)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default: PORT setting)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    uvicorn.run(
        "postboard.main:app",
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


@app.command()
def init_db(database_url: Optional[str] = typer.Option(None, help="Override DATABASE_URL")):
    """Create the database tables."""
    setup_logging()
    database = Database(database_url)

    async def run():
        await database.create_all()
        await database.disconnect()

    asyncio.run(run())
    logger.info("Tables created on %s", database.engine.url.render_as_string(hide_password=True))


@app.command()
def drop_db(
    database_url: Optional[str] = typer.Option(None, help="Override DATABASE_URL"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Drop the database tables and every post in them."""
    setup_logging()
    if not yes:
        typer.confirm("This deletes every post. Continue?", abort=True)

    database = Database(database_url)

    async def run():
        await database.drop_all()
        await database.disconnect()

    asyncio.run(run())
    logger.info("Tables dropped on %s", database.engine.url.render_as_string(hide_password=True))


# ---------------------------
# Entrypoint
# ---------------------------
if __name__ == "__main__":
    app()
