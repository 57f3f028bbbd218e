"""Command: agent-context show - print one context file."""

from __future__ import annotations

import argparse

from rich.console import Console

from agent_context.commands._context import build_helper

console = Console()


def run(args: argparse.Namespace) -> None:
    content = build_helper(args).show_context_file(args.package, args.file)
    if content is None:
        console.print(
            f"[red]Context file[/red] [bold]{args.file}[/bold] [red]not found in[/red] [bold]{args.package}[/bold]"
        )
        raise SystemExit(1)

    console.print(content, markup=False, highlight=False, soft_wrap=True, end="")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "show",
        help="Prints a context file of a package.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Prints one context file. The name may omit its .md or .mdc extension.

Examples:
  agent-context show mypackage getting-started
  agent-context show mypackage guides/configuration.md
        """,
    )
    p.add_argument("package", metavar="PACKAGE", help="Package name.")
    p.add_argument("file", metavar="FILE", help="File path inside the package's context directory.")
    p.set_defaults(func=run)
