"""
File: pyequiv/passes/equivstatus.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

import sys
import logging
from dataclasses import dataclass, field

from ..rtlil import Cell, Design, Selection, SigMap
from .base import Pass

logger = logging.getLogger(__name__)


@dataclass
class EquivStatus:
    #: (module name, cell) pairs
    proven: list[tuple[str, Cell]] = field(default_factory=list)
    unproven: list[tuple[str, Cell]] = field(default_factory=list)


class EquivStatusPass(Pass):
    name = "equiv_status"
    help = """
    equiv_status [options] [selection]

Prints the number of proven and unproven $equiv cells.

    -assert
        produce an error if any unproven $equiv cell is found
"""

    def __init__(self, assert_proven: bool = False) -> None:
        self.assert_proven = assert_proven

    def parse_args(self, args: list[str]) -> Selection:
        argidx = 0
        while argidx < len(args):
            if args[argidx] == "-assert":
                self.assert_proven = True
                argidx += 1
                continue
            break
        return self.extra_args(args, argidx)

    def execute(self, design: Design, selection: Selection = Selection()) -> EquivStatus:
        logger.info("Executing EQUIV_STATUS pass.")
        status = EquivStatus()

        for module in selection.selected_modules(design):
            sigmap = SigMap(module)
            proven, unproven = [], []
            for cell in selection.selected_cells(module):
                if cell.type != "$equiv":
                    continue
                if sigmap(cell.get_port("A")) == sigmap(cell.get_port("B")):
                    proven.append(cell)
                else:
                    unproven.append(cell)

            if not proven and not unproven:
                logger.info("No $equiv cells found in %s.", module.name)
                continue

            logger.info(
                "Found %d $equiv cells in %s: %d proven, %d unproven.",
                len(proven) + len(unproven),
                module.name,
                len(proven),
                len(unproven),
            )
            for cell in unproven:
                logger.info(
                    "  Unproven $equiv %s: %s %s",
                    cell.name,
                    sigmap(cell.get_port("A")),
                    sigmap(cell.get_port("B")),
                )
            status.proven.extend((module.name, c) for c in proven)
            status.unproven.extend((module.name, c) for c in unproven)

        if status.unproven and self.assert_proven:
            logger.error(f"Found {len(status.unproven)} unproven $equiv cells.")
            sys.exit(1)
        return status
