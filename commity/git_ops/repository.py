"""
Git repository operations used by the commit workflow.
"""

from pathlib import Path
from typing import Optional, Tuple
from git import Actor, Repo, InvalidGitRepositoryError, NoSuchPathError, GitCommandError
from git.exc import HookExecutionError
from loguru import logger

from ..exceptions import GitOperationError, RepositoryNotFoundError


class GitRepository:
    """Thin interface over a GitPython repository."""
    
    def __init__(self, start_path: Optional[Path] = None):
        """Open the repository containing start_path, searching parent directories."""
        self.start_path = Path(start_path or Path.cwd())
        try:
            self.repo = Repo(self.start_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise RepositoryNotFoundError(f"No Git repository found at or above {self.start_path}")
        
        if self.repo.bare:
            raise RepositoryNotFoundError(f"Repository at {self.repo.git_dir} is bare")
        logger.debug(f"Initialized Git repository at {self.repo.working_dir}")
    
    @property
    def path(self) -> Path:
        """Absolute path of the working tree root."""
        return Path(self.repo.working_dir).resolve()
    
    @property
    def current_branch(self) -> str:
        try:
            return self.repo.active_branch.name
        except TypeError:
            return "HEAD (detached)"
    
    def staged_change_count(self) -> int:
        """Number of paths whose staged content differs from HEAD."""
        try:
            if self.repo.head.is_valid():
                return len(self.repo.index.diff("HEAD"))
            # No commits yet: everything in the index is staged
            return len(self.repo.index.entries)
        except (GitCommandError, ValueError) as e:
            raise GitOperationError(f"Failed to read staged changes: {e}")
    
    def identity(self) -> Tuple[str, str]:
        """Author name and email from git config."""
        reader = self.repo.config_reader()
        name = reader.get_value("user", "name", "")
        email = reader.get_value("user", "email", "")
        if not name or not email:
            raise GitOperationError(
                "Git identity is not configured; set user.name and user.email"
            )
        return str(name), str(email)
    
    def commit(self, message: str, author_name: str, author_email: str) -> str:
        """Create a commit from the index. Returns the new commit hash."""
        actor = Actor(author_name, author_email)
        try:
            commit = self.repo.index.commit(message, author=actor, committer=actor)
        except (GitCommandError, HookExecutionError, ValueError, OSError) as e:
            raise GitOperationError(f"Failed to create commit: {e}")
        
        logger.info(f"Created commit {commit.hexsha[:8]}: {message.splitlines()[0] if message else ''}")
        return commit.hexsha


def find_repository(start_dir: Path) -> GitRepository:
    """Locate the repository containing start_dir."""
    return GitRepository(start_dir)
