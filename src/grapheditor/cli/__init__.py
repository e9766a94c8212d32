"""Graph editor CLI: inspect graph files and replay pointer sessions.

Entry point for the `grapheditor` command. Requires ``pip install grapheditor[cli]``.

Commands:
    inspect     Show the nodes and links of a graph file
    validate    Check that a graph file loads
    replay      Play a scripted pointer session against a graph
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install grapheditor[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all commands."""
    _require_typer()

    import typer

    from grapheditor.cli import graph_cmd, replay_cmd
    from grapheditor.cli._logging import root_callback

    app = typer.Typer(
        name="grapheditor",
        help="Graph editor file tools and interaction replay.",
        no_args_is_help=True,
    )
    app.callback()(root_callback)
    graph_cmd.register_commands(app)
    replay_cmd.register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()
