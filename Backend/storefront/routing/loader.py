"""
Route table loader.

Each shop owns exactly one route file, ``{routes_dir}/{text_id}.yaml``,
holding an ordered list of route records:

    - pattern: shop-info
      handler: ShopInfo
      action: default

    - patterns:
        cs: kontakt
        en: contact
      handler: Contact

Route tables are never merged or inherited between shops.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .definitions import RouteDefinition


logger = logging.getLogger(__name__)

_TEXT_ID_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")
_EXTENSIONS = (".yaml", ".yml")


class RouteTableError(Exception):
    """Base class for route table configuration errors."""
    def __init__(self, message: str, text_id: str):
        self.message = message
        self.text_id = text_id
        super().__init__(message)


class RouteTableMissing(RouteTableError):
    """Raised when a shop has no route file."""
    def __init__(self, text_id: str, path: Optional[Path] = None):
        self.path = path
        location = f": {path}" if path else ""
        super().__init__(f"Routes file not found for shop '{text_id}'{location}", text_id)


class RouteTableInvalid(RouteTableError):
    """Raised when a shop's route file exists but cannot be used."""
    def __init__(self, text_id: str, reason: str):
        self.reason = reason
        super().__init__(f"Invalid route table for shop '{text_id}': {reason}", text_id)


class RouteTableLoader:
    """Loads a shop's RouteDefinition list from its YAML route file."""

    def __init__(self, routes_dir: Path):
        self.routes_dir = Path(routes_dir)
        if not self.routes_dir.exists():
            logger.warning(f"Routes directory does not exist: {self.routes_dir}")

    def path_for(self, text_id: str) -> Optional[Path]:
        """Return the route file for ``text_id`` if one exists."""
        if not _TEXT_ID_RE.match(text_id or ""):
            return None
        for extension in _EXTENSIONS:
            path = self.routes_dir / f"{text_id}{extension}"
            if path.is_file():
                return path
        return None

    def load_routes(self, text_id: str) -> List[RouteDefinition]:
        """
        Load the ordered route definitions for one shop.

        Raises:
            RouteTableMissing: the shop has no route file
            RouteTableInvalid: the file is not valid YAML or holds invalid records
        """
        path = self.path_for(text_id)
        if path is None:
            raise RouteTableMissing(text_id, self.routes_dir / f"{text_id}.yaml")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RouteTableInvalid(text_id, f"invalid YAML in {path}: {e}") from e

        if data is None:
            data = []
        if isinstance(data, dict):
            data = data.get("routes", [])
        if not isinstance(data, list):
            raise RouteTableInvalid(text_id, f"expected a list of routes, got {type(data).__name__}")

        routes = []
        for index, record in enumerate(data):
            if not isinstance(record, dict):
                raise RouteTableInvalid(text_id, f"route #{index} must be a mapping")
            try:
                routes.append(RouteDefinition.model_validate(record))
            except ValidationError as e:
                raise RouteTableInvalid(text_id, f"route #{index}: {e}") from e

        logger.info(f"Loaded {len(routes)} routes for shop '{text_id}' from {path}")
        return routes

    def available_tenants(self) -> List[str]:
        """Text ids that have a route file, sorted."""
        if not self.routes_dir.is_dir():
            return []
        return sorted(
            {
                path.stem
                for path in self.routes_dir.iterdir()
                if path.suffix in _EXTENSIONS and _TEXT_ID_RE.match(path.stem)
            }
        )
