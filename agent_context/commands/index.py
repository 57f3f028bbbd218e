"""Command: agent-context index - merge the generated Context section into AGENT.md."""

from __future__ import annotations

import argparse

from rich.console import Console

from agent_context.commands._context import build_pipeline, target_path
from agent_context.errors import AgentContextError

console = Console()


def run(args: argparse.Namespace) -> None:
    pipeline = build_pipeline(args)
    path = target_path(args)

    try:
        result = pipeline.run(path, dry_run=args.dry_run)
    except (AgentContextError, OSError) as e:
        console.print(f"[red]Index failed, {path} left unchanged:[/red] {e}", highlight=False)
        raise SystemExit(1)

    if args.print:
        console.print(result.text, markup=False, highlight=False, soft_wrap=True, end="")

    if args.dry_run:
        state = "would change" if result.changed else "is up to date"
        console.print(f"[dim]Dry run: {path} {state} ({result.outcome.value}).[/dim]")
    elif result.changed:
        console.print(f"[green]Updated[/green] [bold]{path}[/bold] ({result.outcome.value})")
    else:
        console.print(f"[dim]{path} is already up to date.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "index",
        help="Merges the generated Context section into the target document.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Summarizes every installed context file and writes the result as the
"Context" section under the "Agent" heading of the target document.
Everything else in the document is preserved. Re-running is a no-op
when nothing changed.

Examples:
  agent-context index
  agent-context index --output docs/AGENT.md
  agent-context index --dry-run --print
  agent-context index --provenance
        """,
    )
    p.add_argument(
        "--output",
        metavar="PATH",
        default=None,
        help="Target document (default from settings: AGENT.md).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute the merge without writing.",
    )
    p.add_argument(
        "--print",
        action="store_true",
        help="Print the merged document.",
    )
    p.add_argument(
        "--provenance",
        action="store_true",
        help="Open the section with a 'Generated on ...' line (changes on every run).",
    )
    p.set_defaults(func=run)
