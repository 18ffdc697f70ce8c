# oauth2_mongo/cli/utils_cli.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple

import typer
from pymongo.errors import PyMongoError

from ..oauth.errors import TokenStoreError
from ..oauth.mongo_token_store import MongoTokenStore, open_mongo_token_store

logger = logging.getLogger(__name__)

KEY_KINDS = ("code", "access", "refresh")


def configure_logging(level_name: str) -> None:
    """Set the root logger level from a level name such as DEBUG or WARNING."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        typer.secho(f"Error: unknown log level '{level_name}'.", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    logging.getLogger().setLevel(level)


def pick_token_key(
    code: Optional[str],
    access: Optional[str],
    refresh: Optional[str],
) -> Tuple[str, str]:
    """
    Return (kind, value) for the single key option given on the command line.
    Exits with an error unless exactly one of --code/--access/--refresh is set.
    """
    given = [
        (kind, value)
        for kind, value in zip(KEY_KINDS, (code, access, refresh))
        if value
    ]
    if len(given) != 1:
        typer.secho(
            "Error: provide exactly one of --code, --access or --refresh.",
            fg=typer.colors.RED
        )
        raise typer.Exit(code=2)
    return given[0]


def run_store_operation(operation: Callable[[MongoTokenStore], Awaitable[Any]]) -> Any:
    """
    Open a token store from settings, run one operation against it and close it.

    Store and driver errors are reported on the console and turned into exit code 1.
    """
    async def _run() -> Any:
        async with open_mongo_token_store() as store:
            return await operation(store)

    try:
        return asyncio.run(_run())
    except TokenStoreError as e:
        typer.secho(f"CLI: Token store error - {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except PyMongoError as e:
        logger.debug("MongoDB operation failed.", exc_info=True)
        typer.secho(f"CLI: MongoDB error - {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
