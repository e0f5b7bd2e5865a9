"""
Locate the configuration file for a repository.
"""

from pathlib import Path
from typing import Optional
from loguru import logger

from ..exceptions import ConfigNotFoundError
from .settings import Settings


def find_config_file(start_dir: Path, settings: Settings, stop_at: Optional[Path] = None) -> Path:
    """Find the configuration file that applies to start_dir.
    
    Walks upward from start_dir looking for the per-repository file. The walk
    ends at stop_at (inclusive) when given, otherwise at the filesystem root.
    Falls back to the global file in the user config directory.
    """
    directory = Path(start_dir).resolve()
    boundary = Path(stop_at).resolve() if stop_at else None
    searched = []
    
    while True:
        candidate = directory / settings.config_filename
        searched.append(candidate)
        if candidate.is_file():
            logger.debug(f"Using repository configuration {candidate}")
            return candidate
        if boundary is not None and directory == boundary:
            break
        if directory.parent == directory:
            break
        directory = directory.parent
    
    global_path = settings.global_config_path
    searched.append(global_path)
    if global_path.is_file():
        logger.debug(f"Using global configuration {global_path}")
        return global_path
    
    raise ConfigNotFoundError(
        f"no config file found in {searched[0]} or {global_path}"
    )
