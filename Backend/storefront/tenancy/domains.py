"""
Static domain → shop mapping.

The mapping comes from the ``domain_mapping`` key of the ``shops`` config and
is the only thing deciding which shop a host belongs to. Matching is exact
after normalization: no wildcards, no implicit ``www.`` stripping.
"""

import logging
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from ..core.layered_config import LayeredConfig


logger = logging.getLogger(__name__)


def normalize_host(host: str) -> str:
    """
    Normalize a Host header value for lookup.

        "WWW.Florea.cz:8080" -> "www.florea.cz"
        "[::1]:8000"         -> "::1"
        "florea.cz."         -> "florea.cz"
    """
    if not host:
        return ""
    host = host.strip().lower()
    if host.startswith("["):
        # Bracketed IPv6 literal, optionally followed by :port
        end = host.find("]")
        host = host[1:end] if end != -1 else host[1:]
    elif host.count(":") == 1:
        host = host.split(":", 1)[0]
    return host.rstrip(".")


class DomainMap(Mapping[str, str]):
    """Immutable, ordered, case-insensitive mapping of domain to shop text id."""

    def __init__(self, mapping: Mapping[str, str]):
        entries: dict[str, str] = {}
        for domain, text_id in mapping.items():
            key = normalize_host(str(domain))
            if not key:
                continue
            if key in entries and entries[key] != text_id:
                logger.warning(
                    f"Domain {key} mapped twice ({entries[key]!r} and {text_id!r}); keeping the first"
                )
                continue
            entries[key] = str(text_id)
        self._entries = MappingProxyType(entries)

    @classmethod
    def from_config(cls, config: LayeredConfig) -> "DomainMap":
        mapping = config.get("shops.domain_mapping", {}) or {}
        domain_map = cls(mapping)
        logger.info(f"Loaded domain mapping with {len(domain_map)} domains")
        return domain_map

    def lookup(self, host: str) -> Optional[str]:
        """Return the shop text id for ``host``, or None when unmapped."""
        return self._entries.get(normalize_host(host))

    def text_ids(self) -> list[str]:
        """Distinct shop text ids in declaration order."""
        return list(dict.fromkeys(self._entries.values()))

    def __getitem__(self, key: str) -> str:
        return self._entries[normalize_host(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
