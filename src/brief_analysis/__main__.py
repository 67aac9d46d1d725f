from __future__ import annotations

import argparse
from pathlib import Path

from .commands import cmd_analyze, cmd_diff, cmd_ping, cmd_validate
from .config import load_config
from .logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="brief_analysis")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("ping", help="Sanity check: configs + env wiring")

    v = sub.add_parser("validate", help="Validate a brief against the brief schema")
    v.add_argument("--brief", required=True)

    a = sub.add_parser("analyze", help="Validate a brief and attach all derived analysis fields")
    a.add_argument("--brief", required=True, help="Path to a generated brief JSON")
    a.add_argument("--previous", required=False, default=None, help="Previous version of the same brief")
    a.add_argument("--out", required=False, default=None, help="Output path (default: <brief>.analyzed.json)")

    d = sub.add_parser("diff", help="Show changes between two brief versions")
    d.add_argument("--previous", required=True)
    d.add_argument("--current", required=True)

    return p


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    configure_logging(load_config().log_level)

    if args.command == "ping":
        cmd_ping()
        return

    if args.command == "validate":
        raise SystemExit(cmd_validate(Path(args.brief).expanduser().resolve()))

    if args.command == "analyze":
        previous = Path(args.previous).expanduser().resolve() if args.previous else None
        out = Path(args.out).expanduser().resolve() if args.out else None
        raise SystemExit(cmd_analyze(Path(args.brief).expanduser().resolve(), previous, out))

    if args.command == "diff":
        raise SystemExit(
            cmd_diff(Path(args.previous).expanduser().resolve(), Path(args.current).expanduser().resolve())
        )

    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
