#!/usr/bin/env python3
"""
Route table deployment check.

Loads the domain mapping, then loads and compiles the route table of every
mapped shop, so a broken or missing table is caught before traffic hits it:

1. Every shop in the domain mapping has a route file
2. Every route file parses and every pattern compiles
3. Route files without any mapped domain are reported
4. Per-language routes without a default-language pattern are reported
   (they are unreachable without a language prefix)
5. Patterns for languages the shop does not support are reported

USAGE:
    python scripts/check_route_tables.py

    # Custom config location, verbose output
    python scripts/check_route_tables.py --config-dir config -v

EXIT CODES:
    0 - No errors (warnings allowed unless --strict)
    1 - At least one ERROR finding (or any finding with --strict)
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "Backend"))

from storefront.core.layered_config import ConfigError, LayeredConfig  # noqa: E402
from storefront.routing import (  # noqa: E402
    RouteTableError,
    RouteTableLoader,
    RouterRegistry,
    SupportedLanguages,
)
from storefront.tenancy.domains import DomainMap  # noqa: E402

# ────────────────────────────────────────────────────────────────
# Configuration
# ────────────────────────────────────────────────────────────────

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "config"


# ────────────────────────────────────────────────────────────────
# Data Classes
# ────────────────────────────────────────────────────────────────

@dataclass
class Finding:
    """A single route table issue."""

    text_id: str
    severity: str
    description: str

    def __str__(self):
        return f"{self.severity}: {self.text_id} - {self.description}"


# ────────────────────────────────────────────────────────────────
# Checking Logic
# ────────────────────────────────────────────────────────────────

def check_shop(text_id: str, config: LayeredConfig, loader: RouteTableLoader) -> List[Finding]:
    """Load, validate and compile one shop's route table."""
    findings = []

    try:
        languages = SupportedLanguages.from_config(config.for_shop(text_id))
    except (ConfigError, ValueError) as e:
        return [Finding(text_id, "ERROR", f"Language configuration: {e}")]

    registry = RouterRegistry(loader, lambda _: languages)
    try:
        registry.get_router(text_id)
    except RouteTableError as e:
        return [Finding(text_id, "ERROR", e.message)]

    for definition in loader.load_routes(text_id):
        if not definition.is_localized:
            continue
        patterns = definition.language_patterns()
        if languages.default not in patterns:
            findings.append(Finding(
                text_id,
                "WARNING",
                f"{definition.destination} has no '{languages.default}' pattern "
                f"and is unreachable without a language prefix",
            ))
        for lang in patterns:
            if not languages.is_supported(lang):
                findings.append(Finding(
                    text_id,
                    "WARNING",
                    f"{definition.destination} has a pattern for unsupported language '{lang}'",
                ))

    return findings


def check_all(config_dir: Path, routes_dir: Optional[Path] = None) -> List[Finding]:
    """Check every mapped shop plus any orphaned route files."""
    config = LayeredConfig(config_dir)
    loader = RouteTableLoader(routes_dir or config_dir / "routes")

    try:
        domain_map = DomainMap.from_config(config)
    except ConfigError as e:
        return [Finding("*", "ERROR", f"Domain mapping: {e}")]

    mapped = domain_map.text_ids()
    findings = []
    for text_id in mapped:
        findings.extend(check_shop(text_id, config, loader))

    for text_id in loader.available_tenants():
        if text_id not in mapped:
            findings.append(Finding(text_id, "INFO", "Route file has no domain in domain_mapping"))

    return findings


# ────────────────────────────────────────────────────────────────
# Reporting
# ────────────────────────────────────────────────────────────────

def print_report(findings: List[Finding], verbose: bool = False):
    """Print the findings report."""

    if not findings:
        print("✅ All route tables load and compile.")
        return

    by_severity = {}
    for f in findings:
        by_severity.setdefault(f.severity, []).append(f)

    print("\n" + "=" * 60)
    print("ROUTE TABLE CHECK REPORT")
    print("=" * 60)

    severity_order = ["ERROR", "WARNING", "INFO"]
    severity_emoji = {
        "ERROR": "🔴",
        "WARNING": "🟡",
        "INFO": "🔵",
    }

    print("\nSUMMARY:")
    for sev in severity_order:
        count = len(by_severity.get(sev, []))
        if count > 0:
            print(f"  {severity_emoji[sev]} {sev}: {count}")

    print(f"\nTOTAL: {len(findings)} findings")

    if verbose or "ERROR" in by_severity:
        print("\n" + "-" * 60)
        print("DETAILS:")
        print("-" * 60)
        for sev in severity_order:
            if sev in by_severity:
                print(f"\n{severity_emoji[sev]} {sev}:")
                for f in by_severity[sev]:
                    print(f"  {f.text_id}: {f.description}")
    else:
        print("\nRun with -v for detailed findings.")


# ────────────────────────────────────────────────────────────────
# Main
# ────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Check that every mapped shop has a usable route table"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed findings"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with code 1 on warnings too"
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=DEFAULT_CONFIG_DIR,
        help=f"Layered config root (default: {DEFAULT_CONFIG_DIR})"
    )
    parser.add_argument(
        "--routes-dir",
        type=Path,
        default=None,
        help="Route files directory (default: <config-dir>/routes)"
    )

    args = parser.parse_args(argv)

    if not args.config_dir.exists():
        print(f"Error: Path {args.config_dir} does not exist", file=sys.stderr)
        return 1

    print(f"Checking route tables in {args.routes_dir or args.config_dir / 'routes'}...")
    findings = check_all(args.config_dir, args.routes_dir)
    print_report(findings, verbose=args.verbose)

    errors = [f for f in findings if f.severity == "ERROR"]
    if errors:
        print(f"\n❌ {len(errors)} shop(s) cannot be routed. Failing.")
        return 1
    if args.strict and any(f.severity == "WARNING" for f in findings):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
