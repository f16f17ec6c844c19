"""Command-line management tasks."""

import asyncio
import logging
from typing import Annotated

import typer

from unbounded_figures.database import async_session
from unbounded_figures.models.user import User
from unbounded_figures.services.users import SEED_USERNAME, seed_user

app = typer.Typer(help="UnboundedFigures management commands")
logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """Set up basic logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def run_seed(username: str) -> tuple[User, bool]:
    """Seed the development user in its own committed transaction."""
    async with async_session() as session:
        user, created = await seed_user(session, username)
        await session.commit()
    return user, created


@app.callback()
def main() -> None:
    """UnboundedFigures management commands."""


@app.command("seed-user")
def seed_user_command(
    username: Annotated[
        str, typer.Option("--username", "-u", help="Username of the development user")
    ] = SEED_USERNAME,
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
) -> None:
    """Create the development seed user if missing and print its id."""
    setup_logging(loglevel)

    user, created = asyncio.run(run_seed(username))
    if not created:
        logger.info("Development user %s already exists", username)

    typer.echo(f"Seeded user id: {user.id}")
    typer.echo(f"Set DEV_SEED_USER_ID={user.id} with DEBUG and DEV_AUTH_BYPASS to use it.")


if __name__ == "__main__":
    app()
