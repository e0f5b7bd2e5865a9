"""
Per-repository store of previously entered field values.

Each repository gets one JSON file under the data directory's cache folder,
named after a SHA-256 of the repository's absolute path. The file holds a flat
name -> string mapping and is rewritten as a whole at the end of every
successful run.
"""

import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Mapping, Union
from loguru import logger

from ..exceptions import PersistenceReadError, PersistenceWriteError


def repository_key(repo_path: Union[str, Path]) -> str:
    """Stable identifier for a repository, derived from its absolute path."""
    absolute = os.path.abspath(os.fspath(repo_path))
    return hashlib.sha256(absolute.encode("utf-8")).hexdigest()


class PersistenceStore:
    """Load and save persisted field values, one file per repository."""
    
    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)
    
    def path_for(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"
    
    def load(self, key: str) -> Dict[str, str]:
        """Return the persisted mapping for key.
        
        A missing file is an empty mapping. An unreadable or malformed file
        raises PersistenceReadError.
        """
        path = self.path_for(key)
        if not path.exists():
            logger.debug(f"No persisted values at {path}")
            return {}
        
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceReadError(f"Failed to read persisted values from {path}: {e}") from e
        
        if not isinstance(data, dict):
            raise PersistenceReadError(f"Persisted values in {path} are not a mapping")
        
        values = {str(name): str(value) for name, value in data.items()}
        logger.debug(f"Loaded {len(values)} persisted values from {path}")
        return values
    
    def save(self, key: str, values: Mapping[str, str]) -> Path:
        """Replace the persisted mapping for key with values."""
        path = self.path_for(key)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(dict(values), f, indent=2, sort_keys=True)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise PersistenceWriteError(f"Failed to save persisted values to {path}: {e}") from e
        
        logger.debug(f"Saved {len(values)} persisted values to {path}")
        return path
    
    def clear(self, key: str) -> bool:
        """Remove the persisted file for key. Returns whether a file was removed."""
        path = self.path_for(key)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise PersistenceWriteError(f"Failed to remove {path}: {e}") from e
        logger.debug(f"Removed persisted values file {path}")
        return True
