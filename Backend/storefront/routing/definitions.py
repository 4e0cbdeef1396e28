from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class RouteDefinition(BaseModel):
    """
    One routing rule from a shop's route table.

    Either ``pattern`` (same URL for every language, with an optional
    language prefix) or ``patterns`` (one URL per language code) is set.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    pattern: Optional[str] = None
    patterns: Optional[Dict[str, Optional[str]]] = None
    handler: str = Field(default="Home", validation_alias=AliasChoices("handler", "presenter"))
    action: str = "default"
    params: Dict[str, str] = Field(default_factory=dict)

    @field_validator("params", mode="before")
    @classmethod
    def stringify_params(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    @field_validator("handler", "action")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @model_validator(mode="after")
    def exactly_one_pattern_form(self) -> "RouteDefinition":
        if (self.pattern is None) == (self.patterns is None):
            raise ValueError("route needs exactly one of 'pattern' or 'patterns'")
        return self

    @property
    def is_localized(self) -> bool:
        return self.patterns is not None

    def language_patterns(self) -> Dict[str, str]:
        """Per-language patterns with empty entries dropped."""
        return {lang: pattern for lang, pattern in (self.patterns or {}).items() if pattern}

    @property
    def destination(self) -> str:
        return f"{self.handler}:{self.action}"
