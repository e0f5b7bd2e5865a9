"""
Commity - commit messages from a configurable form.

Reads a declarative form definition (text, choice and boolean fields plus a
message template), asks for each field in order, renders the template and
commits the staged changes.
"""

__version__ = "1.0.0"

from commity.core import Commity
from commity.config.settings import Settings

__all__ = ["Commity", "Settings"]
