"""
File: pyequiv/rtlil/selection.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

import logging
from fnmatch import fnmatchcase

from .design import Cell, Design, Module

logger = logging.getLogger(__name__)


class Selection:
    """A selection of modules and cells.

    Patterns use shell-style wildcards:
        `*`            everything (also the meaning of an empty selection)
        `mod`          all cells of every module matching `mod`
        `mod/cell`     cells matching `cell` in modules matching `mod`
    """

    def __init__(self, patterns: list[str] = None) -> None:
        self.patterns: list[tuple[str, str]] = []
        for pat in patterns or []:
            if "/" in pat:
                modpat, cellpat = pat.split("/", 1)
            else:
                modpat, cellpat = pat, "*"
            self.patterns.append((modpat, cellpat or "*"))

    def is_full(self) -> bool:
        return not self.patterns or ("*", "*") in self.patterns

    def selected_module(self, module: Module) -> bool:
        if self.is_full():
            return True
        return any(fnmatchcase(module.name, modpat) for modpat, _ in self.patterns)

    def selected_cell(self, module: Module, cell: Cell) -> bool:
        if self.is_full():
            return True
        return any(
            fnmatchcase(module.name, modpat) and fnmatchcase(cell.name, cellpat)
            for modpat, cellpat in self.patterns
        )

    def selected_modules(self, design: Design) -> list[Module]:
        mods = [m for m in design.modules.values() if self.selected_module(m)]
        if not mods:
            logger.warning("Selection %s matches no modules.", self)
        return mods

    def selected_cells(self, module: Module) -> list[Cell]:
        return [c for c in module.cells.values() if self.selected_cell(module, c)]

    def __str__(self) -> str:
        if self.is_full():
            return "*"
        return " ".join(f"{m}/{c}" for m, c in self.patterns)
