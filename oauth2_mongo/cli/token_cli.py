# oauth2_mongo/cli/token_cli.py
import typer
from typing import Optional
from typing_extensions import Annotated
from pydantic import ValidationError

from ..oauth.models import TokenInfo
from ..oauth.mongo_token_store import MongoTokenStore
from .utils_cli import pick_token_key, run_store_operation

app = typer.Typer(
    name="tokens",
    help="Inspect and manage stored OAuth2 tokens.",
    no_args_is_help=True
)

CodeOption = Annotated[Optional[str], typer.Option("--code", help="Authorization code.")]
AccessOption = Annotated[Optional[str], typer.Option("--access", help="Access token.")]
RefreshOption = Annotated[Optional[str], typer.Option("--refresh", help="Refresh token.")]


@app.command("ensure-indexes")
def ensure_indexes():
    """Declare the TTL indexes on the basic, access and refresh collections."""
    async def _noop(store: MongoTokenStore) -> None:
        return None

    # Opening the store declares the indexes
    run_store_operation(_noop)
    typer.secho("TTL indexes are in place.", fg=typer.colors.GREEN)


@app.command("create")
def create_token(
    token_json: Annotated[
        str,
        typer.Option(
            "--token-json",
            help='Token info as JSON (e.g., \'{"access": "a1", "access_expires_in": 3600}\').'
        )
    ]
):
    """Store token information given as JSON."""
    try:
        info = TokenInfo.model_validate_json(token_json)
    except ValidationError as e:
        typer.secho(f"Error: Invalid token info JSON: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    async def _create(store: MongoTokenStore) -> None:
        await store.create(info)

    run_store_operation(_create)
    typer.secho("Token info stored.", fg=typer.colors.GREEN)


@app.command("get")
def get_token(
    code: CodeOption = None,
    access: AccessOption = None,
    refresh: RefreshOption = None,
):
    """Look up token information by code, access token or refresh token."""
    kind, value = pick_token_key(code, access, refresh)

    async def _get(store: MongoTokenStore) -> Optional[TokenInfo]:
        lookup = {
            "code": store.get_by_code,
            "access": store.get_by_access,
            "refresh": store.get_by_refresh,
        }[kind]
        return await lookup(value)

    info = run_store_operation(_get)
    if info is None:
        typer.secho(f"No token info found for {kind} '{value}'.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)
    typer.echo(info.model_dump_json(indent=2))


@app.command("remove")
def remove_token(
    code: CodeOption = None,
    access: AccessOption = None,
    refresh: RefreshOption = None,
):
    """Delete the single record stored under a code, access token or refresh token."""
    kind, value = pick_token_key(code, access, refresh)

    async def _remove(store: MongoTokenStore) -> None:
        remove = {
            "code": store.remove_by_code,
            "access": store.remove_by_access,
            "refresh": store.remove_by_refresh,
        }[kind]
        await remove(value)

    run_store_operation(_remove)
    typer.secho(f"Removed {kind} record '{value}'.", fg=typer.colors.GREEN)
