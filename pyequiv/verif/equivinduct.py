"""
File: pyequiv/verif/equivinduct.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

"""
    Temporal induction over $equiv cells.

    The worker unrolls the selected cells of a module one time step at a
    time. Step s+1 is checked under the assumption that every $equiv cell
    of the workset held in steps 1..s. If that implication is valid for
    some s <= max_seq, the whole workset is proven at once; otherwise each
    cell is tried on its own at step max_seq+1.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..rtlil import Cell, Module, SigBit, SigMap
from ..satinterface import EzSAT, SatGen

logger = logging.getLogger(__name__)


class InductStatus(Enum):
    """Terminal states of an induction run."""

    PROVEN_ALL = 0  #: Induction step held, the entire workset is proven
    BASE_INFEASIBLE = 1  #: Assumed consistency is contradictory, nothing proven
    FALLBACK = 2  #: Step budget exhausted, cells were tried individually


@dataclass
class InductResult:
    status: InductStatus
    #: Cells whose B port was rewritten to A
    proven: list[Cell] = field(default_factory=list)
    #: Last induction step that was attempted
    step: int = 0


class EquivInductWorker:
    """Induction prover for the $equiv cells of one module.

    Attributes:
        module (Module): The module under proof.
        sigmap (SigMap): Canonicalizer snapshot taken at construction.
        cells (list[Cell]): Cells whose behaviour is imported.
        workset (list[Cell]): Unproven $equiv cells to prove.
        ez (EzSAT): The SAT instance, owned by this worker.
        max_seq (int): Maximum number of induction steps.
        success_counter (int): Number of cells proven so far.
        step_is_consistent (dict[int, int]): Per-step literal that is true
            iff every workset cell holds in that step.
    """

    def __init__(
        self,
        module: Module,
        cells: list[Cell],
        workset: list[Cell],
        max_seq: int = 4,
        solver_name: str = "glucose4",
    ) -> None:
        self.module = module
        self.sigmap = SigMap(module)
        self.cells = list(cells)
        self.workset = list(dict.fromkeys(workset))
        self.ez = EzSAT(solver_name)
        self.satgen = SatGen(self.ez, self.sigmap)
        self.max_seq = max_seq
        self.success_counter = 0

        self.step_is_consistent: dict[int, int] = {}
        self.cell_warn_cache: set[Cell] = set()

    def _claim_bits(self, cell: Cell) -> tuple[SigBit, SigBit]:
        bit_a = self.sigmap(cell.get_port("A")).to_single_sigbit()
        bit_b = self.sigmap(cell.get_port("B")).to_single_sigbit()
        return bit_a, bit_b

    def create_timestep(self, step: int) -> None:
        """Import all cells at `step` and record the step's consistency literal."""
        assert (
            step not in self.step_is_consistent
        ), f"Timestep {step} has already been created."
        assert step == len(self.step_is_consistent) + 1, (
            f"Timestep {step} created out of order, "
            f"expected {len(self.step_is_consistent) + 1}."
        )

        for cell in self.cells:
            if not self.satgen.import_cell(cell, step) and cell not in self.cell_warn_cache:
                logger.warning(
                    "No SAT model available for cell %s (%s).", cell.name, cell.type
                )
                self.cell_warn_cache.add(cell)

        equal_terms = []
        for cell in self.workset:
            bit_a, bit_b = self._claim_bits(cell)
            if bit_a != bit_b:
                ez_a = self.satgen.import_sig_bit(bit_a, step)
                ez_b = self.satgen.import_sig_bit(bit_b, step)
                equal_terms.append(self.ez.iff_(ez_a, ez_b))

        self.step_is_consistent[step] = self.ez.all_(equal_terms)

    def ensure_timestep(self, step: int) -> None:
        """Create every missing timestep up to and including `step`."""
        while len(self.step_is_consistent) < step:
            self.create_timestep(len(self.step_is_consistent) + 1)

    def commit(self, cells: list[Cell]) -> None:
        """Mark `cells` as proven by aliasing their B port to their A port."""
        for cell in cells:
            cell.set_port("B", cell.get_port("A"))
        self.success_counter += len(cells)

    def run(self) -> InductResult:
        logger.info(
            "Found %d unproven $equiv cells in module %s:",
            len(self.workset),
            self.module.name,
        )

        self.create_timestep(1)
        for step in range(1, self.max_seq + 1):
            self.ez.assume(self.step_is_consistent[step])

            logger.info(
                "  Proving existence of base case for step %d. (%d clauses over %d variables)",
                step,
                self.ez.num_clauses,
                self.ez.num_variables,
            )
            if not self.ez.solve():
                logger.info("  Proof for base case failed. Circuit inherently diverges!")
                return InductResult(InductStatus.BASE_INFEASIBLE, [], step)

            self.create_timestep(step + 1)
            new_step_not_consistent = self.ez.not_(self.step_is_consistent[step + 1])

            logger.info(
                "  Proving induction step %d. (%d clauses over %d variables)",
                step,
                self.ez.num_clauses,
                self.ez.num_variables,
            )
            if not self.ez.solve(new_step_not_consistent):
                logger.info(
                    "  Proof for induction step holds. Entire workset of %d cells proven!",
                    len(self.workset),
                )
                self.commit(self.workset)
                return InductResult(InductStatus.PROVEN_ALL, list(self.workset), step)

            logger.info(
                "  Proof for induction step failed. %s",
                "Extending to next time step."
                if step != self.max_seq
                else "Trying to prove individual $equiv from workset.",
            )

        return InductResult(
            InductStatus.FALLBACK, self.prove_individually(), self.max_seq
        )

    def prove_individually(self) -> list[Cell]:
        """Try each workset cell on its own at step max_seq+1.

        Returns:
            list[Cell]: The cells that were proven.
        """
        step = self.max_seq + 1
        self.ensure_timestep(step)

        proven = []
        for cell in self.workset:
            bit_a, bit_b = self._claim_bits(cell)
            ez_a = self.satgen.import_sig_bit(bit_a, step)
            ez_b = self.satgen.import_sig_bit(bit_b, step)

            name = self.sigmap(cell.get_port("Y")) if cell.has_port("Y") else cell.name
            if not self.ez.solve(self.ez.xor_(ez_a, ez_b)):
                logger.info("  Trying to prove $equiv for %s: success!", name)
                self.commit([cell])
                proven.append(cell)
            else:
                logger.info("  Trying to prove $equiv for %s: failed.", name)
                logger.debug(
                    "    Counterexample at step %d: %s=%d, %s=%d",
                    step,
                    bit_a,
                    self.ez.model_value(ez_a),
                    bit_b,
                    self.ez.model_value(ez_b),
                )
        return proven

    def close(self) -> None:
        self.ez.delete()

    def __enter__(self) -> "EquivInductWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
