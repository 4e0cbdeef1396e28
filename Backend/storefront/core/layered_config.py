"""
Hierarchical configuration provider.

Configuration is split into named YAML files and layered per shop:

    1. config/common/{name}.yaml
    2. config/common/{name}.local.yaml      (local/dev override, optional)
    3. config/shops/{text_id}/{name}.yaml   (shop-specific, optional)

Later layers override earlier ones. Mappings merge recursively, lists and
scalars are replaced wholesale.

Usage:
    provider = LayeredConfig(Path("config"), current_shop="florea")
    provider.get("app.languages.default", "cs")
    provider.get_for_shop("app.site.name", "velke-vence")
"""

import copy
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""
    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(message)


def merge_recursive(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge ``override`` into a copy of ``base``.

    Rules:
        - Mappings on both sides are merged recursively
        - Lists are replaced completely (never merged element-wise)
        - Scalars in ``override`` replace base values
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = merge_recursive(current, value)
        else:
            merged[key] = value
    return merged


def get_nested_value(data: Any, path: str, default: Any = None) -> Any:
    """Walk a dot-separated path through nested mappings."""
    for key in path.split("."):
        if not isinstance(data, dict) or key not in data:
            return default
        data = data[key]
    return data


class LayeredConfig:
    """
    Config Provider with per-shop layering and a per-(name, shop) cache.

    ``current_shop`` may be None for lookups made before a shop is known
    (e.g. the domain mapping); such lookups read only the common layers.
    """

    def __init__(self, config_dir: Path, current_shop: Optional[str] = None):
        self.config_dir = Path(config_dir)
        self.current_shop = current_shop
        self._cache: Dict[Tuple[str, Optional[str]], Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def for_shop(self, text_id: str) -> "LayeredConfig":
        """Return a provider bound to ``text_id`` that shares this provider's cache."""
        bound = LayeredConfig(self.config_dir, current_shop=text_id)
        bound._cache = self._cache
        bound._lock = self._lock
        return bound

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get configuration for the current shop.

        The first path segment names the file:
            get("app")                       -> whole app config
            get("app.languages.default")     -> nested value
            get("app.site.name", "Default")  -> nested value with fallback
        """
        return self._lookup(path, self.current_shop, default)

    def get_for_shop(self, path: str, text_id: str, default: Any = None) -> Any:
        """Get configuration for a specific shop (admin/tooling use)."""
        return self._lookup(path, text_id, default)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _lookup(self, path: str, text_id: Optional[str], default: Any) -> Any:
        name, _, nested = path.partition(".")
        config = self._load(name, text_id)
        if not nested:
            return copy.deepcopy(config)
        value = get_nested_value(config, nested, default)
        if isinstance(value, (dict, list)):
            return copy.deepcopy(value)
        return value

    def _load(self, name: str, text_id: Optional[str]) -> Dict[str, Any]:
        key = (name, text_id)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        config = self._load_file(self.config_dir / "common" / f"{name}.yaml")

        local_config = self._load_file(self.config_dir / "common" / f"{name}.local.yaml")
        if local_config:
            config = merge_recursive(config, local_config)

        if text_id:
            shop_config = self._load_file(self.config_dir / "shops" / text_id / f"{name}.yaml")
            if shop_config:
                config = merge_recursive(config, shop_config)

        with self._lock:
            self._cache[key] = config
        logger.debug(f"Loaded config '{name}' for shop {text_id!r}")
        return config

    @staticmethod
    def _load_file(path: Path) -> Dict[str, Any]:
        """Load one YAML file; a missing file is an empty layer."""
        if not path.exists():
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}", path)
        return data
