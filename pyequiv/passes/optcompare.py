"""
File: pyequiv/passes/optcompare.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

"""
    Folds comparisons against zero:
        x < 0   ->  0 (unsigned) or the sign bit of x (signed)
        x >= 0  ->  1 (unsigned) or the inverted sign bit of x (signed)
"""

import logging

from ..rtlil import Cell, Design, Module, Selection, SigSpec, State
from .base import Pass

logger = logging.getLogger(__name__)


def _is_signed(cell: Cell) -> bool:
    return bool(cell.get_param("A_SIGNED", 0)) and bool(cell.get_param("B_SIGNED", 0))


def _compares_with_zero(cell: Cell) -> bool:
    b = cell.get_port("B")
    return b.is_fully_const() and b.is_fully_zero()


def optimize_compares(module: Module, cells: list[Cell]) -> int:
    """Rewrite the `$lt`/`$ge` cells in `cells` that compare against zero.

    Returns:
        int: Number of rewritten cells.
    """
    count = 0
    for cell in cells:
        if cell.type not in ("$lt", "$ge") or not _compares_with_zero(cell):
            continue

        a = cell.get_port("A")
        y = cell.get_port("Y")
        a_width = cell.get_param("A_WIDTH", len(a))
        if a_width == 0:
            continue

        if cell.type == "$lt":
            res = SigSpec.from_state(State.S0, len(y))
            if _is_signed(cell):
                logger.info("Found x < 0 (signed) in %s, replacing with the sign bit", cell.name)
                res[0] = a[a_width - 1]
            else:
                logger.info("Found x < 0 (unsigned) in %s, replacing with constant 0", cell.name)
            module.connect(y, res)
            module.remove(cell)
        elif _is_signed(cell):
            logger.info("Found x >= 0 (signed) in %s, replacing with the inverted sign bit", cell.name)
            module.remove(cell)
            module.add_not(module.new_name("not"), SigSpec([a[a_width - 1]]), y[0:1])
            if len(y) > 1:
                module.connect(y[1:], SigSpec.from_state(State.S0, len(y) - 1))
        else:
            logger.info("Found x >= 0 (unsigned) in %s, replacing with constant 1", cell.name)
            module.connect(y, SigSpec.from_const(1, len(y)))
            module.remove(cell)
        count += 1
    return count


class OptComparePass(Pass):
    name = "opt_compare"
    help = """
    opt_compare [selection]

Replaces comparisons of the form 'x < 0' and 'x >= 0' by the sign bit of x
(signed comparisons) or by a constant (unsigned comparisons).
"""

    def execute(self, design: Design, selection: Selection = Selection()) -> int:
        logger.info("Executing OPT_COMPARE pass.")
        count = 0
        for module in selection.selected_modules(design):
            count += optimize_compares(module, selection.selected_cells(module))
        logger.info("Optimized %d comparison cells.", count)
        return count
