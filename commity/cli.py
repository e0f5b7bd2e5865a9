"""
Command line interface using Typer with Rich integration.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional
import typer
from rich.console import Console
from loguru import logger

from .core import Commity
from .config.settings import Settings
from .exceptions import CommityError, UserAborted


app = typer.Typer(
    name="commity",
    help="Compose commit messages from a configurable form",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=False
)

console = Console()
error_console = Console(stderr=True)

EXIT_ERROR = 1
EXIT_ABORTED = 130


def setup_logging(log_level: str = "WARNING", log_file: Optional[Path] = None):
    """Setup logging configuration."""
    logger.remove()
    
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True
    )
    
    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"File logging disabled: {e}")
            return
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 MB",
            retention="7 days"
        )


def parse_overrides(values: Optional[List[str]]) -> Dict[str, str]:
    """Turn repeated NAME=VALUE arguments into a mapping."""
    overrides = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected NAME=VALUE, got {item!r}", param_hint="--set")
        overrides[name.strip()] = value
    return overrides


def _log_level(settings: Settings, verbose: bool, debug: bool) -> str:
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return settings.ui.log_level


def _run(action, settings: Settings, repo_path: Optional[Path]):
    """Run an action against a Commity instance, mapping failures to exit codes."""
    try:
        commity = Commity(settings, repo_path)
        return action(commity)
    except UserAborted:
        console.print("[yellow]Commit canceled - Goodbye![/yellow]")
        raise typer.Exit(EXIT_ABORTED)
    except CommityError as e:
        error_console.print(f"[red]Error:[/red] {e}", highlight=False)
        raise typer.Exit(EXIT_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(EXIT_ABORTED)
    except Exception as e:
        logger.exception("Unexpected error occurred")
        error_console.print(f"[red]Unexpected error:[/red] {e}", highlight=False)
        raise typer.Exit(EXIT_ERROR)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    values: Optional[List[str]] = typer.Option(
        None, "--set", "-s",
        help="Preset a field value as NAME=VALUE (repeatable)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n",
        help="Preview commit message without creating commit"
    ),
    no_store: bool = typer.Option(
        False, "--no-store",
        help="Neither read nor write remembered field values"
    ),
    repo_path: Optional[Path] = typer.Option(
        None, "--repo", "-r",
        help="Git repository path (default: current directory)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose logging"
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d",
        help="Enable debug logging (includes verbose)"
    ),
    version: bool = typer.Option(
        False, "--version",
        help="Show version information"
    )
):
    """
    Fill in a form and commit the staged changes with the rendered message.
    
    The form is read from [green].commity.yaml[/green] in the repository, or from
    [green]commity.yaml[/green] in the user configuration directory.
    
    [bold blue]Examples:[/bold blue]
    
    [green]commity[/green]                                # Fill in the form and commit
    [green]commity --set type=fix[/green]                 # Preselect a field value
    [green]commity --dry-run[/green]                      # Preview without committing
    [green]commity show-config[/green]                    # Show the form definition
    [green]commity clear-cache[/green]                    # Forget remembered values
    """
    if version:
        from . import __version__
        console.print(f"[bold blue]Commity[/bold blue] version [green]{__version__}[/green]")
        return
    
    settings = Settings()
    if no_store:
        settings.storage.enabled = False
    setup_logging(_log_level(settings, verbose, debug), settings.log_file)
    ctx.obj = settings
    
    if ctx.invoked_subcommand is None:
        overrides = parse_overrides(values)
        _run(lambda commity: commity.run(overrides, dry_run=dry_run), settings, repo_path)


@app.command("show-config")
def show_config(
    ctx: typer.Context,
    repo_path: Optional[Path] = typer.Option(
        None, "--repo", "-r",
        help="Git repository path (default: current directory)"
    )
):
    """Show the form configuration that applies to a repository."""
    settings = ctx.obj or Settings()
    _run(lambda commity: commity.show_configuration(), settings, repo_path)


@app.command("clear-cache")
def clear_cache(
    ctx: typer.Context,
    repo_path: Optional[Path] = typer.Option(
        None, "--repo", "-r",
        help="Git repository path (default: current directory)"
    )
):
    """Forget the remembered field values of a repository."""
    settings = ctx.obj or Settings()
    removed = _run(lambda commity: commity.clear_persisted(), settings, repo_path)
    if removed:
        console.print("[green]Remembered values cleared[/green]")
    else:
        console.print("[yellow]No remembered values for this repository[/yellow]")


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(EXIT_ABORTED)


if __name__ == "__main__":
    main()
