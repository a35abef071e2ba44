"""
File: pyequiv/pyeqmain.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

import sys
import logging
from typing import Optional

import typer
from typer import Argument, Option
from typing_extensions import Annotated
from rich.console import Console
from rich.table import Table

from pyequiv.pyeqsetup import PYEqArgs, start
from pyequiv.passmanager import PassManager
from pyequiv.passes import EquivStatus

logger = logging.getLogger(__name__)

DESCRIPTION = "PyEquiv: Temporal-induction proofs of $equiv cells in sequential circuits."
app = typer.Typer(help=DESCRIPTION)


def setup_logging(logfile: str) -> None:
    h1 = logging.StreamHandler(sys.stdout)
    h1.setLevel(logging.INFO)
    h1.setFormatter(logging.Formatter("%(levelname)s::%(message)s"))
    handlers = [h1]

    if logfile != "":
        h2 = logging.FileHandler(logfile, mode="w")
        h2.setLevel(logging.DEBUG)
        h2.setFormatter(
            logging.Formatter("%(asctime)s::%(name)s::%(levelname)s::%(message)s")
        )
        handlers.append(h2)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)


@app.callback()
def main_callback(
    logfile: Annotated[
        str, Option(help="Debug log file (empty to disable).")
    ] = "debug.log",
):
    setup_logging(logfile)


def print_status_table(status: EquivStatus) -> None:
    table = Table(title="$equiv cells")
    table.add_column("Module", style="cyan")
    table.add_column("Cell", style="cyan")
    table.add_column("Status")
    for modname, cell in status.proven:
        table.add_row(modname, cell.name, "[green]proven[/green]")
    for modname, cell in status.unproven:
        table.add_row(modname, cell.name, "[red]unproven[/red]")
    Console().print(table)


@app.command("equiv_induct")
def equiv_induct_main(
    design: Annotated[str, Argument(help="Path to the input JSON netlist")],
    selection: Annotated[
        Optional[list[str]], Argument(help="Modules/cells taking part in the proof")
    ] = None,
    seq: Annotated[
        Optional[int],
        Option("-seq", "--seq", help="The max. number of time steps to be considered (default = 4)"),
    ] = None,
    outpath: Annotated[
        str, Option("-o", "--output", help="Path to write the resulting netlist to")
    ] = "",
    cfgpath: Annotated[
        str, Option("-c", "--config", help="Path to the PyEquiv config file")
    ] = "",
    solver: Annotated[str, Option(help="python-sat solver name")] = "",
):
    """Prove $equiv cells using temporal induction.

    Only selected $equiv cells are proven and only selected cells are used to
    perform the proof. Proven cells get their B input tied to their A input.
    """
    args = PYEqArgs(
        design=design,
        cfgpath=cfgpath,
        outpath=outpath,
        selection=selection or [],
        seq=seq,
        solver=solver,
    )
    config, des = start(args)
    pm = PassManager(des, config)
    pm.run("equiv_induct")
    pm.save()


@app.command("opt_compare")
def opt_compare_main(
    design: Annotated[str, Argument(help="Path to the input JSON netlist")],
    selection: Annotated[
        Optional[list[str]], Argument(help="Modules/cells to optimize")
    ] = None,
    outpath: Annotated[
        str, Option("-o", "--output", help="Path to write the resulting netlist to")
    ] = "",
):
    """Fold 'x < 0' and 'x >= 0' comparisons."""
    args = PYEqArgs(design=design, outpath=outpath, selection=selection or [])
    config, des = start(args)
    pm = PassManager(des, config)
    pm.run("opt_compare")
    pm.save()


@app.command("equiv_status")
def equiv_status_main(
    design: Annotated[str, Argument(help="Path to the input JSON netlist")],
    selection: Annotated[
        Optional[list[str]], Argument(help="Modules/cells to report")
    ] = None,
    assert_proven: Annotated[
        bool,
        Option("-assert", "--assert", help="Fail if any unproven $equiv cell is found"),
    ] = False,
):
    """Report proven and unproven $equiv cells."""
    args = PYEqArgs(design=design, selection=selection or [])
    config, des = start(args)
    pm = PassManager(des, config)
    status = pm.run("equiv_status -assert" if assert_proven else "equiv_status")
    print_status_table(status)


@app.command("script")
def script_main(
    design: Annotated[str, Argument(help="Path to the input JSON netlist")],
    commands: Annotated[
        str, Option("-p", "--commands", help="Commands separated by ';'")
    ] = "",
    scriptpath: Annotated[
        str, Option("-s", "--script", help="File with one command per line")
    ] = "",
    outpath: Annotated[
        str, Option("-o", "--output", help="Path to write the resulting netlist to")
    ] = "",
    cfgpath: Annotated[
        str, Option("-c", "--config", help="Path to the PyEquiv config file")
    ] = "",
):
    """Run a sequence of pass commands on a design."""
    args = PYEqArgs(design=design, cfgpath=cfgpath, outpath=outpath)
    config, des = start(args)
    pm = PassManager(des, config)
    if scriptpath != "":
        with open(scriptpath, "r") as f:
            pm.run_script(f.read())
    pm.run_script(commands)
    pm.save()
    for record in pm.records:
        logger.info(f"{record}")


def main():
    """Main entry point for the PyEquiv command-line interface."""
    app()


if __name__ == "__main__":
    main()
