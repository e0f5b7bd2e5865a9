"""
Configuration document parsing.

Entries are a tagged union with an external discriminant: the `type` key is
read first, then the whole entry is validated against the model registered for
that type. An unknown type stops parsing immediately.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Type

import yaml
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ConfigParseError, InvalidConfigurationError
from .schema import BooleanEntry, Choice, ChoiceEntry, Configuration, Entry, TextEntry


ENTRY_TYPES: Dict[str, Type[Entry]] = {
    "Text": TextEntry,
    "Choice": ChoiceEntry,
    "Boolean": BooleanEntry,
}


def _format_errors(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into a single readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


def pad_choice_labels(choices: List[Choice]) -> List[Choice]:
    """Prefix every label with its value, padded to the widest value."""
    width = max((len(choice.value) for choice in choices), default=0)
    return [
        choice.model_copy(update={"label": f"{choice.value.ljust(width)} {choice.label}"})
        for choice in choices
    ]


def parse_entry(node: Any, index: int) -> Entry:
    """Decode a single entry: discriminator first, then the full shape."""
    if not isinstance(node, Mapping):
        raise ConfigParseError(f"entry #{index + 1} must be a mapping, got {type(node).__name__}")
    
    entry_type = node.get("type", "")
    model = ENTRY_TYPES.get(entry_type) if isinstance(entry_type, str) else None
    if model is None:
        raise ConfigParseError(f"unknown entry type: {entry_type}")
    
    try:
        entry = model.model_validate(dict(node))
    except PydanticValidationError as e:
        name = node.get("name", f"#{index + 1}")
        raise ConfigParseError(f"invalid {entry_type} entry '{name}': {_format_errors(e)}") from e
    
    if isinstance(entry, ChoiceEntry) and entry.show_values:
        entry = entry.model_copy(update={"choices": pad_choice_labels(entry.choices)})
    
    return entry


def parse_configuration(data: Any) -> Configuration:
    """Build a Configuration from an already decoded document."""
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigParseError(f"configuration must be a mapping, got {type(data).__name__}")
    
    raw_entries = data.get("entries") or []
    if not isinstance(raw_entries, list):
        raise ConfigParseError("'entries' must be a list")
    
    entries = [parse_entry(node, index) for index, node in enumerate(raw_entries)]
    
    seen = set()
    for entry in entries:
        if entry.name in seen:
            raise ConfigParseError(f"duplicate entry name: {entry.name}")
        seen.add(entry.name)
    
    try:
        configuration = Configuration(
            entries=entries,
            template=data.get("template", ""),
            overview=data.get("overview") or False,
        )
    except PydanticValidationError as e:
        raise ConfigParseError(f"invalid configuration: {_format_errors(e)}") from e
    
    logger.debug(f"Parsed configuration with {len(entries)} entries: {', '.join(configuration.names)}")
    return configuration


def ensure_usable(configuration: Configuration) -> Configuration:
    """Reject a configuration that cannot drive a form."""
    if not configuration.entries or not configuration.template:
        raise InvalidConfigurationError("Invalid configuration: no entries or template provided")
    return configuration


def parse_configuration_text(text: str) -> Configuration:
    """Parse a YAML document held in a string."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"invalid YAML: {e}") from e
    return parse_configuration(data)


def load_configuration(path: Path) -> Configuration:
    """Read, parse and check a configuration file."""
    logger.debug(f"Loading configuration from {path}")
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigParseError(f"could not read {path}: {e}") from e
    
    try:
        configuration = parse_configuration_text(text)
    except ConfigParseError as e:
        raise ConfigParseError(f"{path}: {e}") from e
    return ensure_usable(configuration)
