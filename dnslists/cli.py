"""
Command-line access to the allow, deny and regex lists.

Usage:
    dnslists list deny
    dnslists add allow example.com
    dnslists remove regex '^ads?\\.' --missing-ok
    dnslists --env-file /etc/dnslists/dnslists.env --no-sync add deny ads.example.com
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from .config import load_config, validate_config
from .lists import ListError, ListKind
from .service import build_registry

logger = logging.getLogger("dnslists")


def _load_env_file(path: str) -> None:
    """Load environment variables from a .env-style file."""
    from dotenv import dotenv_values

    values = dotenv_values(path)
    for key, value in values.items():
        if value is None:
            continue
        os.environ[key] = value


def _kind(value: str) -> ListKind:
    try:
        return ListKind.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dnslists", description="Manage DNS allow/deny/regex lists")
    parser.add_argument("--env-file", help="Load environment variables from this file first")
    parser.add_argument("--no-sync", action="store_true", help="Do not notify the DNS daemon")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="action", required=True)

    show = sub.add_parser("list", help="Print the entries of a list")
    show.add_argument("kind", type=_kind)

    add = sub.add_parser("add", help="Add an entry")
    add.add_argument("kind", type=_kind)
    add.add_argument("entry")

    remove = sub.add_parser("remove", help="Remove an entry")
    remove.add_argument("kind", type=_kind)
    remove.add_argument("entry")
    remove.add_argument("--missing-ok", action="store_true", help="Succeed if the entry is absent")
    return parser


async def run(args: argparse.Namespace) -> int:
    config = load_config()
    errors = validate_config(config)
    if errors:
        for err in errors:
            logger.error(err)
        return 1

    controller = build_registry(config, sync=not args.no_sync)[args.kind]
    try:
        if args.action == "list":
            for entry in controller.get():
                print(entry)
        elif args.action == "add":
            await controller.add(args.entry)
        elif args.missing_ok:
            if not await controller.try_remove(args.entry):
                logger.info("%s was not on the %s list", args.entry, args.kind.value)
        else:
            await controller.remove(args.entry)
    except ListError as exc:
        logger.error("%s", exc)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if args.env_file:
        _load_env_file(args.env_file)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
