"""
Exception hierarchy for Commity.

Everything that is a real failure derives from CommityError so the CLI can
report it uniformly. UserAborted is kept outside that tree: cancelling the
form is a normal way to leave the program, not an error.
"""


class CommityError(Exception):
    """Base class for all Commity failures."""
    pass


class ConfigNotFoundError(CommityError):
    """Neither a repository config file nor a global config file exists."""
    pass


class ConfigParseError(CommityError):
    """The configuration document is malformed or names an unknown entry type."""
    pass


class InvalidConfigurationError(CommityError):
    """The configuration parsed but cannot drive a form (no entries, no template)."""
    pass


class ValidationError(CommityError):
    """A user supplied value violates a field constraint. Recoverable by re-prompting."""
    
    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field_name = field_name
        self.message = message


class PatternCompileError(CommityError):
    """A text entry declares a pattern that is not a valid regular expression."""
    
    def __init__(self, field_name: str, pattern: str, reason: str):
        super().__init__(f"Invalid pattern for field '{field_name}': {pattern!r} ({reason})")
        self.field_name = field_name
        self.pattern = pattern


class TemplateParseError(CommityError):
    """The message template has invalid syntax."""
    pass


class TemplateExecutionError(CommityError):
    """The message template failed while being evaluated."""
    pass


class PersistenceReadError(CommityError):
    """The persisted value file exists but could not be read or decoded."""
    pass


class PersistenceWriteError(CommityError):
    """The persisted value file could not be written."""
    pass


class RepositoryNotFoundError(CommityError):
    """No Git repository was found at or above the start directory."""
    pass


class NothingToCommitError(CommityError):
    """The repository has no staged changes."""
    pass


class GitOperationError(CommityError):
    """A Git operation (status, identity lookup, commit) failed."""
    pass


class UserAborted(Exception):
    """The user cancelled the form."""
    pass
