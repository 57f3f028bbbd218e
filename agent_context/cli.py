"""
agent-context: install package documentation fragments and index them in AGENT.md.

Usage:
  agent-context <command> [options]

Commands:
  list     Lists installed packages that ship context, or one package's files.
  show     Prints one context file of a package.
  install  Copies context from packages into the local context directory.
  index    Merges the generated Context section into the target document.
"""

from __future__ import annotations

import argparse
import logging

from agent_context.commands import index as cmd_index
from agent_context.commands import install as cmd_install
from agent_context.commands import list_packages as cmd_list
from agent_context.commands import show as cmd_show
from agent_context.version import VERSION


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-context",
        description="Install and index documentation fragments shipped by Python packages.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"agent-context {VERSION}"
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="YAML settings file (default: agent_context.yaml, then config/config.yaml).",
    )
    parser.add_argument(
        "--context-path",
        metavar="DIR",
        default=None,
        help="Local context directory (default from settings: .context).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output.",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_list.add_parser(subparsers)
    cmd_show.add_parser(subparsers)
    cmd_install.add_parser(subparsers)
    cmd_index.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    from agent_context.commands._context import load_app_settings

    app_settings = load_app_settings(args)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else app_settings.logging.level,
        format=app_settings.logging.format,
    )
    args.func(args)


if __name__ == "__main__":
    main()
