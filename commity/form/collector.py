"""
Interactive collection of field values.

Fields are asked one at a time in configuration order. Each prompt is seeded
with the field's current value from the FormState; invalid answers are reported
and the same field is asked again. Cancelling at any point raises UserAborted
and leaves nothing rendered or persisted.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.prompt import Confirm, Prompt
from loguru import logger

from ..config.schema import BooleanEntry, ChoiceEntry, Entry, TextEntry
from ..exceptions import UserAborted, ValidationError
from ..ui.console import CommityConsole
from .runtime import FieldValue, FormState


@dataclass
class RepositoryOverview:
    """What the overview step shows before the first field."""
    
    path: Path
    branch: str
    staged_count: int


class RichPrompter:
    """Ask for values on the terminal using Rich prompts."""
    
    def __init__(self, console: CommityConsole):
        self.console = console
    
    def confirm_overview(self, overview: RepositoryOverview) -> bool:
        return Confirm.ask("Continue?", default=True, console=self.console.console)
    
    def ask_text(self, entry: TextEntry, current: str) -> str:
        return Prompt.ask(
            "[highlight]>[/highlight]",
            default=current,
            show_default=bool(current),
            console=self.console.console,
        )
    
    def ask_multiline(self, entry: TextEntry, current: str) -> str:
        """Open the user's editor; keeping the buffer unsaved keeps the current text."""
        self.console.print_info("Opening editor, save and close it to continue")
        edited = click.edit(text=current, extension=".txt", require_save=True)
        if edited is None:
            return current
        return edited.rstrip("\n")
    
    def ask_choice(self, entry: ChoiceEntry, current: str) -> str:
        self.console.show_choices(entry, current)
        answer = Prompt.ask(
            "[highlight]>[/highlight]",
            default=current,
            show_default=bool(current),
            console=self.console.console,
        )
        # Allow picking by position as well as by value
        if answer.isdigit() and not entry.has_value(answer):
            position = int(answer)
            if 1 <= position <= len(entry.choices):
                return entry.choices[position - 1].value
        return answer
    
    def ask_boolean(self, entry: BooleanEntry, current: bool) -> bool:
        return Confirm.ask("[highlight]>[/highlight]", default=current, console=self.console.console)


class FormCollector:
    """Drive the overview step and the field sequence."""
    
    def __init__(self, console: CommityConsole, prompter=None):
        self.console = console
        self.prompter = prompter or RichPrompter(console)
    
    def collect(self, state: FormState, overview: Optional[RepositoryOverview] = None) -> FormState:
        """Ask every field in order. Raises UserAborted if the user cancels."""
        try:
            if state.configuration.overview and overview is not None:
                self.console.show_overview(overview.path, overview.branch, overview.staged_count)
                if not self.prompter.confirm_overview(overview):
                    raise UserAborted("Commit canceled")
            
            for entry in state.configuration.entries:
                self._collect_entry(state, entry)
                self.console.console.print()
        except (KeyboardInterrupt, EOFError):
            raise UserAborted("Commit canceled")
        
        logger.debug(f"Collected values for {len(state.configuration.entries)} fields")
        return state
    
    def _collect_entry(self, state: FormState, entry: Entry) -> None:
        current = state.get(entry.name)
        self.console.show_entry_header(entry)
        
        while True:
            answer = self._ask(entry, current)
            try:
                state.set(entry.name, answer)
                return
            except ValidationError as e:
                self.console.print_error(e.message)
                current = answer
    
    def _ask(self, entry: Entry, current: FieldValue) -> FieldValue:
        if isinstance(entry, BooleanEntry):
            return self.prompter.ask_boolean(entry, bool(current))
        if isinstance(entry, ChoiceEntry):
            return self.prompter.ask_choice(entry, str(current))
        if entry.multi_line:
            return self.prompter.ask_multiline(entry, str(current))
        return self.prompter.ask_text(entry, str(current))
