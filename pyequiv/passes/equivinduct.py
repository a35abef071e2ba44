"""
File: pyequiv/passes/equivinduct.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

import sys
import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from ..pyeqconfig import InductConfig, SolverConfig
from ..rtlil import Design, Selection, SigMap
from ..verif import EquivInductWorker, InductResult
from .base import Pass

logger = logging.getLogger(__name__)


@dataclass
class EquivInductStats:
    #: Module name -> number of unproven $equiv cells handed to the prover
    found: dict[str, int] = field(default_factory=dict)
    #: Module name -> outcome of the prover
    results: dict[str, InductResult] = field(default_factory=dict)
    success_counter: int = 0


class EquivInductPass(Pass):
    name = "equiv_induct"
    help = """
    equiv_induct [options] [selection]

Uses a version of temporal induction to prove $equiv cells.

Only selected $equiv cells are proven and only selected cells are used to
perform the proof.

    -seq <N>
        the max. number of time steps to be considered (default = 4)

This command is very effective in proving complex sequential circuits, when
the internal state of the circuit quickly propagates to $equiv cells.

However, this command uses a weak definition of 'equivalence': This command
proves that the two circuits will not diverge after they produce equal
outputs (observable points via $equiv) for at least <N> cycles (the <N>
specified via -seq).

Combined with simulation this is very powerful because simulation can give
you confidence that the circuits start out synced for at least <N> cycles
after reset.
"""

    def __init__(
        self,
        config: InductConfig = InductConfig(),
        solver: SolverConfig = SolverConfig(),
    ) -> None:
        self.config = config
        self.solver = solver

    def parse_args(self, args: list[str]) -> Selection:
        argidx = 0
        while argidx < len(args):
            if args[argidx] == "-seq" and argidx + 1 < len(args):
                try:
                    self.config = InductConfig(seq=int(args[argidx + 1]))
                except (ValueError, ValidationError) as e:
                    logger.error(f"Invalid value for -seq: {args[argidx + 1]} ({e})")
                    sys.exit(1)
                argidx += 2
                continue
            break
        return self.extra_args(args, argidx)

    def execute(
        self, design: Design, selection: Selection = Selection()
    ) -> EquivInductStats:
        """Prove the unproven selected $equiv cells of every selected module.

        Args:
            design (Design): The design; proven cells are rewritten in place.
            selection (Selection): Modules and cells taking part in the proof.

        Returns:
            EquivInductStats: Per-module outcomes and the number of new proofs.
        """
        logger.info("Executing EQUIV_INDUCT pass.")
        stats = EquivInductStats()

        for module in selection.selected_modules(design):
            sigmap = SigMap(module)
            cells = selection.selected_cells(module)

            unproven_equiv_cells = [
                cell
                for cell in cells
                if cell.type == "$equiv"
                and sigmap(cell.get_port("A")) != sigmap(cell.get_port("B"))
            ]

            if not unproven_equiv_cells:
                logger.info(
                    "No selected unproven $equiv cells found in %s.", module.name
                )
                continue

            stats.found[module.name] = len(unproven_equiv_cells)
            with EquivInductWorker(
                module,
                cells,
                unproven_equiv_cells,
                self.config.seq,
                self.solver.name,
            ) as worker:
                stats.results[module.name] = worker.run()
                stats.success_counter += worker.success_counter

        logger.info(
            "Proved %d previously unproven $equiv cells.", stats.success_counter
        )
        return stats
