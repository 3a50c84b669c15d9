"""
Main CLI application
"""
import os
import sys
import typer
from pathlib import Path
from typing import Optional

from ...core.constants import COMPLETION_ENV
from ...core.exceptions import ConfigError, Ec2SshError, ProfileNotFoundError, StoreError
from ...core.interfaces import PromptProvider, SessionLauncher
from ...core.logging import setup_logging, get_logger, get_stderr_console
from ...domain.connect import ConnectionOrchestrator
from ...domain.discovery import DiscoveryService
from ...domain.profiles import ProfileStore
from ...infrastructure.session import SubprocessSessionLauncher
from ...infrastructure.state import JsonFileBackend
from ..config.loader import ConfigLoader, Settings
from .completion import PROG_NAME, completion_candidates, registration_script
from .prompts import RichPromptProvider

logger = get_logger(__name__)
stderr_console = get_stderr_console()

app = typer.Typer(
    name=PROG_NAME,
    add_completion=False,
    help="Connect to EC2 instances by name, id or address",
    rich_markup_mode="rich",
)


# ============================================================
# Wiring
# ============================================================

def load_settings(config_file: Optional[Path] = None, store_path: Optional[Path] = None) -> Settings:
    """Resolve settings from config file, environment and CLI"""
    return ConfigLoader().load(
        toml_path=config_file,
        cli_overrides={"store_path": str(store_path) if store_path else None},
    )


def create_store(settings: Settings) -> ProfileStore:
    """Open the profile store for this process"""
    return ProfileStore(JsonFileBackend(settings.store_path))


def create_discovery_service(store: ProfileStore, settings: Settings) -> DiscoveryService:
    return DiscoveryService(store, max_workers=settings.max_workers)


def create_session_launcher(settings: Settings) -> SessionLauncher:
    return SubprocessSessionLauncher(settings.ssh_binary)


def create_prompt_provider() -> PromptProvider:
    return RichPromptProvider()


def create_orchestrator(store: ProfileStore, settings: Settings) -> ConnectionOrchestrator:
    return ConnectionOrchestrator(
        store,
        create_session_launcher(settings),
        create_prompt_provider(),
        default_user=settings.default_user,
        default_key=settings.default_key,
    )


# ============================================================
# Commands
# ============================================================

@app.command()
def main(
    identifier: Optional[str] = typer.Argument(
        None,
        help="Instance id, name tag or public address (omit to list instances)",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Configuration file path (TOML)",
    ),
    store_path: Optional[Path] = typer.Option(
        None,
        "--store",
        help="Profile store file path",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level", "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
    completion_script: bool = typer.Option(
        False,
        "--completion-script",
        help="Print the bash line registering tab completion",
    ),
):
    """
    Connect to an EC2 instance over SSH.

    Without an identifier, fetches the running instances of all configured
    regions and prints one "tag:address" line per instance.

    Examples:
        ec2-ssh web
        ec2-ssh "web (1)"
        ec2-ssh i-0123456789abcdef0
        eval "$(ec2-ssh --completion-script)"
    """
    setup_logging(level=log_level, log_file=log_file)

    if completion_script:
        typer.echo(registration_script())
        return

    try:
        settings = load_settings(config_file, store_path)
        store = create_store(settings)

        if identifier is None:
            service = create_discovery_service(store, settings)
            for value in service.discover(settings.regions, settings.roles):
                typer.echo(value)
            return

        code = create_orchestrator(store, settings).connect(identifier)
    except ProfileNotFoundError as e:
        stderr_console.print(f"[red]Error:[/red] {e}!")
        stderr_console.print(f"Enter [cyan]{PROG_NAME}[/cyan] and press TAB to fetch the latest instances.")
        raise typer.Exit(1)
    except (ConfigError, StoreError) as e:
        stderr_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Ec2SshError as e:
        stderr_console.print(f"[red]Connection error:[/red] {e}")
        raise typer.Exit(1)

    raise typer.Exit(code)


def complete(comp_line: str, comp_point: Optional[str] = None) -> int:
    """
    Bash completion provider: print candidates for the current word.

    Failures are logged and yield no candidates.
    """
    setup_logging(level="ERROR")
    try:
        settings = load_settings()
        store = create_store(settings)
        suggestions = create_discovery_service(store, settings).discover(settings.regions, settings.roles)
    except Ec2SshError as e:
        logger.error("Completion failed: %s", e)
        return 1

    for candidate in completion_candidates(suggestions, comp_line, comp_point):
        print(candidate)
    return 0


def run():
    """CLI entry point"""
    comp_line = os.environ.get(COMPLETION_ENV)
    if comp_line is not None:
        sys.exit(complete(comp_line, os.environ.get("COMP_POINT")))
    app()


if __name__ == "__main__":
    run()
