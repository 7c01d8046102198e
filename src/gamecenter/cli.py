from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import yaml

from . import __version__
from .app import create_channel, create_registry
from .config import InputSettings
from .exceptions import ValidationError
from .input.definitions import load_definitions
from .input.registry import MappingRegistry
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def _settings(args: argparse.Namespace) -> InputSettings:
    catalog = Path(args.catalog) if getattr(args, "catalog", None) else None
    return InputSettings.from_env(catalog_path=catalog)


def _cmd_show(args: argparse.Namespace) -> int:
    registry = create_registry(args.settings)
    data = registry.full_mapping_map().as_dict()
    if args.format == "json":
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), end="")
    return 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    registry = create_registry(args.settings)
    ctx = registry.resolve_context(args.name)
    groups = ", ".join(g.label for g in ctx.groups)
    print(f"{ctx.name}\t{ctx.identifier}\t{ctx.label}\t[{groups}]")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    path = Path(args.path)
    try:
        MappingRegistry.from_definitions(load_definitions(path))
    except ValidationError as e:
        print(f"INVALID: {path}\n{e.to_human()}")
        return 1
    print(f"OK: {path}")
    return 0


def _cmd_simulate(args: argparse.Namespace) -> int:
    settings = args.settings
    if args.supported is not None:
        settings = replace(settings, remapping_supported=args.supported)
    channel = create_channel(settings)
    calls = [("isSupported", None), ("initialize", None)]
    if args.method not in ("isSupported", "initialize"):
        calls.append((args.method, {"context": args.argument} if args.argument is not None else None))
    for method, arguments in calls:
        resp = channel.invoke(method, arguments)
        detail = resp.value if resp.ok else resp.message
        print(f"{method}: {resp.status} {detail}")
    active = channel.controller.active_context
    print(f"active: {active.name if active else '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gamecenter-input", description="Game Center input mapping tools")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("show", help="Print the full mapping map handed to the host")
    s.add_argument("--catalog", help="Catalog definitions file (YAML)", default=None)
    s.add_argument("--format", choices=["yaml", "json"], default="yaml")
    s.set_defaults(func=_cmd_show)

    r = sub.add_parser("resolve", help="Show which context a name resolves to")
    r.add_argument("name")
    r.add_argument("--catalog", help="Catalog definitions file (YAML)", default=None)
    r.set_defaults(func=_cmd_resolve)

    v = sub.add_parser("validate", help="Validate a catalog definitions file")
    v.add_argument("path")
    v.set_defaults(func=_cmd_validate)

    m = sub.add_parser("simulate", help="Drive the UI channel against the loopback host")
    m.add_argument("method", help="Channel method, e.g. setContext or clear")
    m.add_argument("argument", nargs="?", default=None, help="Context name for setContext")
    m.add_argument("--catalog", help="Catalog definitions file (YAML)", default=None)
    support = m.add_mutually_exclusive_group()
    support.add_argument("--supported", dest="supported", action="store_true", default=None)
    support.add_argument("--unsupported", dest="supported", action="store_false")
    m.set_defaults(func=_cmd_simulate)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.settings = _settings(args)
    configure_logging(level_name=args.settings.log_level, verbosity=args.verbose)
    try:
        return args.func(args)
    except ValidationError as e:
        print(f"INVALID catalog\n{e.to_human()}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
