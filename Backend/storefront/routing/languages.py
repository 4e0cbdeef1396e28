import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from ..core.layered_config import LayeredConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupportedLanguages:
    """The default language plus the ordered set of languages a shop serves."""

    default: str
    supported: Tuple[str, ...]

    def __post_init__(self):
        if not self.default:
            raise ValueError("default language must not be empty")
        if self.default not in self.supported:
            raise ValueError(
                f"default language {self.default!r} must be one of the supported languages {list(self.supported)}"
            )

    @classmethod
    def of(cls, default: str, supported: Iterable[str]) -> "SupportedLanguages":
        # dict.fromkeys keeps the first occurrence of each code in order
        return cls(default=default, supported=tuple(dict.fromkeys(str(code) for code in supported)))

    @classmethod
    def from_config(cls, config: LayeredConfig) -> "SupportedLanguages":
        default = config.get("app.languages.default", "cs")
        supported = config.get("app.languages.supported", [default]) or [default]
        return cls.of(default, supported)

    @property
    def prefixed(self) -> Tuple[str, ...]:
        """Languages whose URLs carry a '{lang}/' prefix, i.e. all but the default."""
        return tuple(code for code in self.supported if code != self.default)

    def is_supported(self, language: object) -> bool:
        return isinstance(language, str) and language in self.supported
