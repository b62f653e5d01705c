"""CLI entrypoint: Typer app definition and command registration"""

import typer

from docpatch.cli.commands import extract_cmd, fix_cmd, resolve_cmd, serve_cmd


app = typer.Typer(name="docpatch", no_args_is_help=True, help="Chat-driven markdown section fixes as pull requests")

app.command(name="serve")(serve_cmd)
app.command(name="resolve")(resolve_cmd)
app.command(name="extract")(extract_cmd)
app.command(name="fix")(fix_cmd)
