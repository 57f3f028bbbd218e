"""Command: agent-context list - packages with context, or one package's files."""

from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table
from rich import box

from agent_context.commands._context import build_helper

console = Console()


def _show_packages(args: argparse.Namespace) -> None:
    packages = build_helper(args).find_packages_with_context()
    if not packages:
        console.print("[yellow]No installed packages provide context.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("PACKAGE", style="bold cyan", no_wrap=True)
    table.add_column("VERSION", no_wrap=True)
    table.add_column("PATH", no_wrap=False)

    for package in packages:
        table.add_row(package.name, package.version, package.path)

    console.print(table)
    console.print(f"  [dim]{len(packages)} package(s)[/dim]")


def _show_files(args: argparse.Namespace) -> None:
    files = build_helper(args).list_context_files(args.package)
    if files is None:
        console.print(f"[red]No context found for package[/red] [bold]{args.package}[/bold]")
        raise SystemExit(1)

    for path in files:
        console.print(path, markup=False, highlight=False, soft_wrap=True)


def run(args: argparse.Namespace) -> None:
    if args.package:
        _show_files(args)
    else:
        _show_packages(args)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "list",
        help="Lists packages that ship context, or the files of one package.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Lists installed packages with a context directory. With a package name,
lists that package's context files instead.

Examples:
  agent-context list
  agent-context list requests-toolbelt
        """,
    )
    p.add_argument(
        "package",
        metavar="PACKAGE",
        nargs="?",
        default=None,
        help="Package whose context files to list.",
    )
    p.set_defaults(func=run)
