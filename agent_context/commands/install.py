"""Command: agent-context install - copy package context into the local context directory."""

from __future__ import annotations

import argparse

from rich.console import Console

from agent_context.commands._context import build_helper

console = Console()


def run(args: argparse.Namespace) -> None:
    helper = build_helper(args)
    context_path = helper.store.context_path

    if not args.packages:
        installed = helper.install_all_context()
        if not installed:
            console.print("[yellow]No installed packages provide context.[/yellow]")
            return
        for name in installed:
            console.print(f"[green]Installed[/green] [bold]{name}[/bold] -> {context_path}")
        console.print(f"  [dim]{len(installed)} package(s)[/dim]")
        return

    missing = []
    for name in args.packages:
        if helper.install_package_context(name):
            console.print(f"[green]Installed[/green] [bold]{name}[/bold] -> {context_path}")
        else:
            console.print(f"[yellow]No context found for[/yellow] [bold]{name}[/bold] - skipped.")
            missing.append(name)

    if missing:
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "install",
        help="Copies context from packages into the local context directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Copies each package's context directory into <context-path>/<package>/.
Without package names, installs context from every package that ships it.
Packages without context are skipped; the exit code is 1 if any named one was missing.

Examples:
  agent-context install
  agent-context install mypackage otherpackage
  agent-context --context-path docs/context install
        """,
    )
    p.add_argument(
        "packages",
        metavar="PACKAGE",
        nargs="*",
        help="Packages to install (default: all).",
    )
    p.set_defaults(func=run)
