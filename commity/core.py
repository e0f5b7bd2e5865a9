"""
Core Commity engine that orchestrates all components.
"""

from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple
from loguru import logger

from .config.locator import find_config_file
from .config.parser import load_configuration
from .config.schema import Configuration
from .config.settings import Settings
from .exceptions import NothingToCommitError, PersistenceReadError, PersistenceWriteError
from .form.collector import FormCollector, RepositoryOverview
from .form.runtime import FormState
from .git_ops.repository import GitRepository, find_repository
from .render.template import render_message
from .storage.persistence import PersistenceStore, repository_key
from .ui.console import CommityConsole


class Commity:
    """Core Commity application engine."""
    
    def __init__(
        self,
        settings: Optional[Settings] = None,
        directory: Optional[Path] = None,
        console: Optional[CommityConsole] = None,
        prompter=None,
        store: Optional[PersistenceStore] = None,
    ):
        """Initialize Commity for the repository containing directory."""
        self.settings = settings or Settings()
        self.directory = Path(directory or Path.cwd()).resolve()
        self.git_repo: GitRepository = find_repository(self.directory)
        self.console = console or CommityConsole(self.settings)
        self.store = store or PersistenceStore(self.settings.cache_dir)
        self.collector = FormCollector(self.console, prompter)
        
        logger.debug(f"Commity initialized for {self.git_repo.path}")
    
    @property
    def repo_key(self) -> str:
        return repository_key(self.git_repo.path)
    
    def load_configuration(self) -> Tuple[Path, Configuration]:
        """Locate and parse the configuration that applies to the target directory."""
        config_path = find_config_file(self.directory, self.settings, stop_at=self.git_repo.path)
        return config_path, load_configuration(config_path)
    
    def load_persisted(self) -> Dict[str, str]:
        """Previously stored values for this repository; empty on any read problem."""
        if not self.settings.storage.enabled:
            return {}
        try:
            return self.store.load(self.repo_key)
        except PersistenceReadError as e:
            logger.warning(f"Ignoring persisted values: {e}")
            self.console.print_warning("Could not read remembered values, starting from defaults")
            return {}
    
    def save_persisted(self, state: FormState) -> None:
        """Remember the values of `store` fields. Failures only warn."""
        if not self.settings.storage.enabled:
            return
        try:
            self.store.save(self.repo_key, state.stored_values())
        except PersistenceWriteError as e:
            logger.warning(str(e))
            self.console.print_warning("Could not remember field values for the next run")
    
    def run(self, overrides: Optional[Mapping[str, str]] = None, dry_run: bool = False) -> str:
        """Run the commit workflow and return the rendered message."""
        logger.info(f"Running commit workflow in {self.git_repo.path} (dry_run={dry_run})")
        
        staged_count = self.git_repo.staged_change_count()
        if staged_count == 0:
            raise NothingToCommitError(f"Nothing to commit in {self.git_repo.path}")
        
        config_path, configuration = self.load_configuration()
        logger.info(f"Loaded {len(configuration.entries)} fields from {config_path}")
        
        state = FormState.build(configuration, overrides, self.load_persisted())
        
        overview = RepositoryOverview(
            path=self.git_repo.path,
            branch=self.git_repo.current_branch,
            staged_count=staged_count,
        )
        self.collector.collect(state, overview)
        
        message = render_message(configuration.template, state.values())
        
        if dry_run:
            self.console.show_commit_message_preview(message)
            self.console.print_info("Dry run complete - no commit created")
            return message
        
        author_name, author_email = self.git_repo.identity()
        commit_hash = self.git_repo.commit(message, author_name, author_email)
        
        self.console.print_success(f"Commit successful! ({commit_hash[:8]})")
        self.console.console.print(message, markup=False, highlight=False)
        
        self.save_persisted(state)
        return message
    
    def show_configuration(self) -> None:
        """Show the configuration that applies to the target directory."""
        config_path, configuration = self.load_configuration()
        self.console.show_configuration(config_path, configuration)
        
        if self.settings.storage.enabled:
            persisted = self.load_persisted()
            if persisted:
                self.console.console.print()
                self.console.console.print("[title]Remembered values:[/title]")
                for name, value in persisted.items():
                    self.console.console.print(f"  {name} = {value!r}", markup=False, highlight=False)
    
    def clear_persisted(self) -> bool:
        """Forget remembered values for this repository."""
        removed = self.store.clear(self.repo_key)
        logger.info(f"Cleared persisted values for {self.git_repo.path}: {removed}")
        return removed
