"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from postblocks.cli.commands import (
    _settings, add_block_cmd, blocks_cmd, export_cmd, import_cmd, init_cmd,
    remove_block_cmd, reorder_cmd, toc_cmd, update_block_cmd,
)


app = typer.Typer(name="postblocks", no_args_is_help=True, help="Article HTML <-> content block structure tooling")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    logging.basicConfig(
        level=logging.DEBUG if verbose else _settings().log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="init")(init_cmd)
app.command(name="import")(import_cmd)
app.command(name="export")(export_cmd)
app.command(name="blocks")(blocks_cmd)
app.command(name="toc")(toc_cmd)
app.command(name="add-block")(add_block_cmd)
app.command(name="update-block")(update_block_cmd)
app.command(name="remove-block")(remove_block_cmd)
app.command(name="reorder")(reorder_cmd)
