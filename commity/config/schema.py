"""
Typed model of the form configuration.

The schema objects are frozen: they describe fields, they never hold the value
a user is typing. Live values are owned by commity.form.runtime.FormState.
"""

from typing import List, Literal, Union, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(v: Any) -> Any:
    """Normalize YAML scalars that should have been strings."""
    if v is None:
        return ""
    if isinstance(v, bool):
        return str(v).lower()
    if isinstance(v, (int, float)):
        return str(v)
    return v


class SchemaModel(BaseModel):
    """Common model configuration for all schema objects."""
    
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )


class Choice(SchemaModel):
    """A single selectable option of a choice entry."""
    
    value: str
    label: str = ""
    
    @field_validator("value", "label", mode="before")
    @classmethod
    def coerce_scalar(cls, v: Any) -> Any:
        return _as_text(v)


class EntryBase(SchemaModel):
    """Attributes shared by every entry type."""
    
    name: str = Field(min_length=1)
    label: str = ""
    description: str = ""
    store: bool = False
    
    @field_validator("label", "description", mode="before")
    @classmethod
    def coerce_display(cls, v: Any) -> Any:
        return _as_text(v)
    
    @property
    def title(self) -> str:
        """Label to show when prompting, falling back to the name."""
        return self.label or self.name


class TextEntry(EntryBase):
    """Free text input, optionally constrained by length and a pattern."""
    
    type: Literal["Text"] = "Text"
    default: str = ""
    min_length: int = Field(default=0, ge=0, alias="minLength")
    max_length: int = Field(default=0, ge=0, alias="maxLength")
    multi_line: bool = Field(default=False, alias="multiLine")
    pattern: str = ""
    pattern_hint: str = Field(default="", alias="patternHint")
    
    @field_validator("default", "pattern", "pattern_hint", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)


class ChoiceEntry(EntryBase):
    """Single selection from an ordered list of options."""
    
    type: Literal["Choice"] = "Choice"
    default: str = ""
    choices: List[Choice] = Field(default_factory=list)
    show_values: bool = Field(default=False, alias="showValues")
    
    @field_validator("default", mode="before")
    @classmethod
    def coerce_default(cls, v: Any) -> Any:
        return _as_text(v)
    
    @property
    def values(self) -> List[str]:
        return [choice.value for choice in self.choices]
    
    def has_value(self, value: str) -> bool:
        """Check whether value is one of the declared option values."""
        return any(choice.value == value for choice in self.choices)


class BooleanEntry(EntryBase):
    """Yes/no confirmation."""
    
    type: Literal["Boolean"] = "Boolean"
    default: bool = False
    
    @field_validator("default", mode="before")
    @classmethod
    def none_to_false(cls, v: Any) -> Any:
        return False if v is None else v


Entry = Union[TextEntry, ChoiceEntry, BooleanEntry]


class Configuration(SchemaModel):
    """A complete form: ordered entries, the message template and the overview flag."""
    
    entries: List[Entry] = Field(default_factory=list)
    template: str = ""
    overview: bool = False
    
    @field_validator("template", mode="before")
    @classmethod
    def coerce_template(cls, v: Any) -> Any:
        return _as_text(v)
    
    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]
    
    def get_entry(self, name: str) -> Entry:
        """Look up an entry by name."""
        for entry in self.entries:
            if entry.name == name:
                return entry
        raise KeyError(name)
