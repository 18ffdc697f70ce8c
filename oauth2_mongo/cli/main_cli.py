# oauth2_mongo/cli/main_cli.py
from typing import Optional

import typer
from typing_extensions import Annotated

from . import token_cli
from .utils_cli import configure_logging
from ..settings import settings

app = typer.Typer(
    name="oauth2-mongo",
    help="OAuth2 MongoDB token store command line interface.",
    no_args_is_help=True
)

app.add_typer(token_cli.app, name="tokens")


@app.callback()
def main_callback(
    log_level: Annotated[Optional[str], typer.Option(
        "--log-level",
        help="Logging level for this run. Defaults to the LOG_LEVEL setting."
    )] = None,
):
    """Manage OAuth2 token records stored in MongoDB."""
    configure_logging(log_level or settings.log_level)


def cli_entry_point():
    app()


if __name__ == "__main__":
    cli_entry_point()
