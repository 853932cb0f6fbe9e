"""Main CLI entry point for PlaceHub commands."""
import click
from dotenv import load_dotenv

# Connection fallbacks (POSTGRES_USER, DB_HOST...) are read from the environment
load_dotenv()

from placehub.cli import db  # noqa: E402


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """PlaceHub - multi-site local directory CLI."""
    pass


# Register command groups
cli.add_command(db.db_group, name="db")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run("placehub.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
