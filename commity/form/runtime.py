"""
Live form state.

A FormState holds the current value of every entry of a Configuration, keyed
by entry name. The Configuration itself is never mutated, so the same parsed
schema can seed any number of runs.

Initial values are resolved with the precedence

    explicit override  >  persisted value (store entries only)  >  schema default
"""

import re
from typing import Dict, Mapping, Optional, Pattern, Union

from loguru import logger

from ..config.schema import BooleanEntry, ChoiceEntry, Configuration, Entry, TextEntry
from ..exceptions import PatternCompileError, ValidationError


FieldValue = Union[str, bool]


def coerce_boolean(raw: str) -> bool:
    """Interpret an overlay string as a boolean.
    
    Only "true" (any case) and "1" are true. Everything else, including
    strings that look like "yes", is false.
    """
    return raw.lower() == "true" or raw == "1"


def coerce_overlay(entry: Entry, raw: Optional[str], current: FieldValue) -> FieldValue:
    """Apply a single overlay string to an entry, returning the resulting value.
    
    Invalid overlays are ignored and the current value is kept.
    """
    if raw is None:
        return current
    
    if isinstance(entry, BooleanEntry):
        return coerce_boolean(raw)
    
    if isinstance(entry, ChoiceEntry):
        if entry.has_value(raw):
            return raw
        logger.debug(f"Ignoring value {raw!r} for '{entry.name}': not one of {entry.values}")
        return current
    
    # Text: any non-empty overlay replaces the value, validation happens on submit
    if raw:
        return raw
    return current


def compile_pattern(entry: TextEntry) -> Optional[Pattern]:
    """Compile the entry pattern, or return None when it has none."""
    if not entry.pattern:
        return None
    try:
        return re.compile(entry.pattern)
    except re.error as e:
        raise PatternCompileError(entry.name, entry.pattern, str(e)) from e


def validate_text(entry: TextEntry, value: str) -> str:
    """Check a text value against the entry's length and pattern constraints.
    
    Raises ValidationError for user correctable problems and PatternCompileError
    when the entry's own pattern is broken.
    """
    length = len(value)
    if length < entry.min_length:
        raise ValidationError(
            entry.name,
            f"{entry.title} must be at least {entry.min_length} characters (got {length})"
        )
    if entry.max_length > 0 and length > entry.max_length:
        raise ValidationError(
            entry.name,
            f"{entry.title} must be at most {entry.max_length} characters (got {length})"
        )
    
    pattern = compile_pattern(entry)
    if pattern is not None and not pattern.search(value):
        hint = entry.pattern_hint or entry.pattern
        raise ValidationError(entry.name, f"{entry.title} must match {hint}")
    
    return value


class FormState:
    """Mutable values of one form run."""
    
    def __init__(self, configuration: Configuration):
        self.configuration = configuration
        self._values: Dict[str, FieldValue] = {
            entry.name: entry.default for entry in configuration.entries
        }
    
    @classmethod
    def build(
        cls,
        configuration: Configuration,
        overrides: Optional[Mapping[str, str]] = None,
        persisted: Optional[Mapping[str, str]] = None,
    ) -> "FormState":
        """Create a state seeded from defaults, persisted values and overrides.
        
        Every text pattern is compiled up front so a broken schema fails
        before the first prompt.
        """
        state = cls(configuration)
        overrides = overrides or {}
        persisted = persisted or {}
        
        for entry in configuration.entries:
            if isinstance(entry, TextEntry):
                compile_pattern(entry)
            
            value = entry.default
            if entry.store:
                value = coerce_overlay(entry, persisted.get(entry.name), value)
            value = coerce_overlay(entry, overrides.get(entry.name), value)
            state._values[entry.name] = value
        
        unknown = set(overrides) - set(configuration.names)
        if unknown:
            logger.debug(f"Ignoring overrides for unknown fields: {', '.join(sorted(unknown))}")
        
        return state
    
    def get(self, name: str) -> FieldValue:
        return self._values[name]
    
    def set(self, name: str, value: FieldValue) -> None:
        """Accept a submitted value, validating text entries first."""
        entry = self.configuration.get_entry(name)
        if isinstance(entry, TextEntry):
            value = validate_text(entry, str(value))
        elif isinstance(entry, BooleanEntry):
            value = bool(value)
        elif isinstance(entry, ChoiceEntry) and not entry.has_value(str(value)):
            raise ValidationError(name, f"{value!r} is not a valid option for {entry.title}")
        self._values[name] = value
    
    def values(self) -> Dict[str, FieldValue]:
        """Template bindings: entry name to current value, in entry order."""
        return {entry.name: self._values[entry.name] for entry in self.configuration.entries}
    
    def stored_values(self) -> Dict[str, str]:
        """String-serialized values of the entries marked `store`."""
        stored = {}
        for entry in self.configuration.entries:
            if not entry.store:
                continue
            value = self._values[entry.name]
            stored[entry.name] = str(value).lower() if isinstance(value, bool) else str(value)
        return stored
