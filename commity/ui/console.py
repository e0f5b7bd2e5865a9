"""
Console output with Rich components.
"""

from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.theme import Theme
from rich.markup import escape
from rich import box

from ..config.schema import BooleanEntry, ChoiceEntry, Configuration, Entry, TextEntry
from ..config.settings import Settings


class CommityConsole:
    """Console interface for Commity."""
    
    def __init__(self, settings: Settings, console: Optional[Console] = None):
        """Initialize console with settings."""
        self.settings = settings
        self._setup_styles()
        if console is None:
            console = Console(
                color_system="auto" if settings.ui.use_colors else None,
                theme=self.theme,
            )
        else:
            console.push_theme(self.theme)
        self.console = console
    
    def _setup_styles(self) -> None:
        """Setup custom styles for consistent theming."""
        self.styles = {
            "title": "bold",
            "success": "bold blue",
            "warning": "bold yellow",
            "error": "bold red",
            "info": "blue",
            "muted": "dim",
            "highlight": "bold cyan",
            "commit_type": "bold magenta",
        }
        self.theme = Theme(self.styles)
    
    def show_overview(self, repo_path: Path, branch: str, staged_count: int) -> None:
        """Show the repository a commit is about to be created in."""
        noun = "file" if staged_count == 1 else "files"
        overview = Panel.fit(
            f"[title]Repository:[/title] {escape(str(repo_path))}\n"
            f"[title]Branch:[/title] [highlight]{escape(branch)}[/highlight]\n"
            f"[title]Staged:[/title] {staged_count} {noun}",
            title="Commit Overview",
            box=box.ROUNDED,
            style="blue",
        )
        self.console.print(overview)
        self.console.print()
    
    def show_entry_header(self, entry: Entry) -> None:
        """Print the title and description of the field being asked."""
        self.console.print(f"[title]{escape(entry.title)}[/title]")
        if entry.description:
            self.console.print(f"[muted]{escape(entry.description)}[/muted]")
    
    def show_choices(self, entry: ChoiceEntry, current: str) -> None:
        """List the options of a choice entry, marking the current one."""
        for index, choice in enumerate(entry.choices, 1):
            marker = "●" if choice.value == current else "○"
            label = choice.label or choice.value
            style = "highlight" if choice.value == current else "muted"
            self.console.print(f"  [{style}]{marker} {index:>2}. {escape(label)}[/{style}]")
    
    def show_commit_message_preview(self, message: str, title: str = "Commit Message") -> None:
        """Show the rendered commit message."""
        lines = message.split("\n")
        header = escape(lines[0])
        if ":" in lines[0]:
            prefix, rest = lines[0].split(":", 1)
            header = f"[commit_type]{escape(prefix)}[/commit_type]:{escape(rest)}"
        body = "\n".join(escape(line) for line in lines[1:])
        self.console.print(Panel(
            header + ("\n" + body if len(lines) > 1 else ""),
            title=title,
            box=box.ROUNDED,
            style="blue",
        ))
        self.console.print()
    
    def show_configuration(self, config_path: Path, configuration: Configuration) -> None:
        """Print where the configuration came from and the fields it defines."""
        self.console.print(f"[title]Configuration:[/title] {escape(str(config_path))}")
        self.console.print(f"[title]Overview:[/title] {configuration.overview}")
        self.console.print()
        
        table = Table(title="Fields", box=box.SIMPLE_HEAD)
        table.add_column("Name", style="bold")
        table.add_column("Type", style="cyan")
        table.add_column("Default")
        table.add_column("Store", justify="center")
        table.add_column("Constraints", style="muted")
        
        for entry in configuration.entries:
            table.add_row(
                escape(entry.name),
                entry.type,
                escape(_format_default(entry)),
                "✓" if entry.store else "",
                escape(_describe_constraints(entry)),
            )
        
        self.console.print(table)
        self.console.print()
        self.console.print("[title]Template:[/title]")
        self.console.print(escape(configuration.template), highlight=False)
    
    def print_success(self, message: str) -> None:
        """Print success message."""
        self.console.print(f"[success]✓ {escape(message)}[/success]")
    
    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self.console.print(f"[warning]⚠ {escape(message)}[/warning]")
    
    def print_error(self, message: str) -> None:
        """Print error message."""
        self.console.print(f"[error]✗ {escape(message)}[/error]")
    
    def print_info(self, message: str) -> None:
        """Print info message."""
        self.console.print(f"[info]ℹ {escape(message)}[/info]")


def _format_default(entry: Entry) -> str:
    if isinstance(entry, BooleanEntry):
        return "true" if entry.default else "false"
    return entry.default


def _describe_constraints(entry: Entry) -> str:
    """Short human summary of an entry's constraints."""
    if isinstance(entry, ChoiceEntry):
        return ", ".join(entry.values)
    if isinstance(entry, TextEntry):
        parts = []
        if entry.min_length:
            parts.append(f"min {entry.min_length}")
        if entry.max_length:
            parts.append(f"max {entry.max_length}")
        if entry.multi_line:
            parts.append("multi-line")
        if entry.pattern:
            parts.append(entry.pattern_hint or f"/{entry.pattern}/")
        return ", ".join(parts)
    return ""
