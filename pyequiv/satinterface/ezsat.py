"""
File: pyequiv/satinterface/ezsat.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

"""
    EzSAT:
        Incremental CNF builder on top of a python-sat solver. Logical terms
        are plain DIMACS literals; every gate is Tseitin-encoded as soon as
        it is constructed, so a term can be passed to `solve` as a one-shot
        assumption or made permanent with `assume`.
"""

import logging
from typing import Hashable, Optional

from pysat.formula import IDPool
from pysat.solvers import Solver

logger = logging.getLogger(__name__)


class EzSAT:
    """Incremental SAT instance with logical-gate constructors.

    Attributes:
        vpool (IDPool): Variable allocator; named literals are memoized.
        solver (Solver): The underlying incremental solver.
        num_clauses (int): Number of clauses handed to the solver.
        num_solves (int): Number of solve calls issued.
    """

    def __init__(self, solver_name: str = "glucose4") -> None:
        self.vpool = IDPool()
        self.solver = Solver(name=solver_name)
        self.num_clauses = 0
        self.num_solves = 0
        # Structural hashing of gates: (op, inputs) -> output literal
        self._gates: dict[tuple, int] = {}

        self.CONST_TRUE = self.vpool.id("$true")
        self.CONST_FALSE = -self.CONST_TRUE
        self.add_clause([self.CONST_TRUE])

    @property
    def num_variables(self) -> int:
        return self.vpool.top

    def literal(self, name: Optional[Hashable] = None) -> int:
        """Get the literal for `name`, or a fresh anonymous literal."""
        if name is None:
            return self.vpool.id()
        return self.vpool.id(name)

    def add_clause(self, clause: list[int]) -> None:
        self.solver.add_clause(clause)
        self.num_clauses += 1

    def is_const(self, a: int) -> bool:
        return a in (self.CONST_TRUE, self.CONST_FALSE)

    # Gates

    def not_(self, a: int) -> int:
        return -a

    def and_(self, a: int, b: int) -> int:
        if a == self.CONST_FALSE or b == self.CONST_FALSE or a == -b:
            return self.CONST_FALSE
        if a == self.CONST_TRUE or a == b:
            return b
        if b == self.CONST_TRUE:
            return a
        key = ("and", min(a, b), max(a, b))
        if key not in self._gates:
            y = self.literal()
            self.add_clause([-y, a])
            self.add_clause([-y, b])
            self.add_clause([y, -a, -b])
            self._gates[key] = y
        return self._gates[key]

    def or_(self, a: int, b: int) -> int:
        return -self.and_(-a, -b)

    def xor_(self, a: int, b: int) -> int:
        if a == self.CONST_FALSE:
            return b
        if a == self.CONST_TRUE:
            return -b
        if b == self.CONST_FALSE:
            return a
        if b == self.CONST_TRUE:
            return -a
        if a == b:
            return self.CONST_FALSE
        if a == -b:
            return self.CONST_TRUE
        # xor(~a, b) == ~xor(a, b): hash on positive inputs only
        invert = (a < 0) != (b < 0)
        a, b = abs(a), abs(b)
        key = ("xor", min(a, b), max(a, b))
        if key not in self._gates:
            y = self.literal()
            self.add_clause([-y, a, b])
            self.add_clause([-y, -a, -b])
            self.add_clause([y, -a, b])
            self.add_clause([y, a, -b])
            self._gates[key] = y
        return -self._gates[key] if invert else self._gates[key]

    def iff_(self, a: int, b: int) -> int:
        return -self.xor_(a, b)

    def ite_(self, c: int, t: int, e: int) -> int:
        """If-then-else: `c ? t : e`."""
        if c == self.CONST_TRUE or t == e:
            return t
        if c == self.CONST_FALSE:
            return e
        if c < 0:
            c, t, e = -c, e, t
        key = ("ite", c, t, e)
        if key not in self._gates:
            y = self.literal()
            self.add_clause([-c, -t, y])
            self.add_clause([-c, t, -y])
            self.add_clause([c, -e, y])
            self.add_clause([c, e, -y])
            self._gates[key] = y
        return self._gates[key]

    def all_(self, lits: list[int]) -> int:
        """N-ary AND; the empty conjunction is CONST_TRUE."""
        args = []
        for a in lits:
            if a == self.CONST_FALSE or -a in args:
                return self.CONST_FALSE
            if a != self.CONST_TRUE and a not in args:
                args.append(a)
        if not args:
            return self.CONST_TRUE
        if len(args) == 1:
            return args[0]
        key = ("all",) + tuple(sorted(args))
        if key not in self._gates:
            y = self.literal()
            for a in args:
                self.add_clause([-y, a])
            self.add_clause([y] + [-a for a in args])
            self._gates[key] = y
        return self._gates[key]

    def any_(self, lits: list[int]) -> int:
        """N-ary OR; the empty disjunction is CONST_FALSE."""
        return -self.all_([-a for a in lits])

    # Bit vectors (LSB first)

    def vec_const(self, value: int, width: int) -> list[int]:
        return [
            self.CONST_TRUE if (value >> i) & 1 else self.CONST_FALSE
            for i in range(width)
        ]

    def vec_extend(self, vec: list[int], width: int, signed: bool) -> list[int]:
        if len(vec) >= width:
            return vec[:width]
        pad = vec[-1] if signed and vec else self.CONST_FALSE
        return vec + [pad] * (width - len(vec))

    def vec_not(self, vec: list[int]) -> list[int]:
        return [-a for a in vec]

    def vec_and(self, vec1: list[int], vec2: list[int]) -> list[int]:
        return [self.and_(a, b) for a, b in zip(vec1, vec2)]

    def vec_or(self, vec1: list[int], vec2: list[int]) -> list[int]:
        return [self.or_(a, b) for a, b in zip(vec1, vec2)]

    def vec_xor(self, vec1: list[int], vec2: list[int]) -> list[int]:
        return [self.xor_(a, b) for a, b in zip(vec1, vec2)]

    def vec_iff(self, vec1: list[int], vec2: list[int]) -> list[int]:
        return [self.iff_(a, b) for a, b in zip(vec1, vec2)]

    def vec_ite(self, c: int, vec_t: list[int], vec_e: list[int]) -> list[int]:
        return [self.ite_(c, t, e) for t, e in zip(vec_t, vec_e)]

    def vec_eq(self, vec1: list[int], vec2: list[int]) -> int:
        assert len(vec1) == len(vec2), "vec_eq on vectors of different widths"
        return self.all_(self.vec_iff(vec1, vec2))

    def vec_ne(self, vec1: list[int], vec2: list[int]) -> int:
        return -self.vec_eq(vec1, vec2)

    def vec_reduce_and(self, vec: list[int]) -> int:
        return self.all_(vec)

    def vec_reduce_or(self, vec: list[int]) -> int:
        return self.any_(vec)

    def vec_reduce_xor(self, vec: list[int]) -> int:
        res = self.CONST_FALSE
        for a in vec:
            res = self.xor_(res, a)
        return res

    def _full_adder(self, a: int, b: int, c: int) -> tuple[int, int]:
        t = self.xor_(a, b)
        return self.xor_(t, c), self.or_(self.and_(a, b), self.and_(c, t))

    def _add_with_carry(
        self, vec1: list[int], vec2: list[int], carry: int
    ) -> tuple[list[int], int]:
        res = []
        for a, b in zip(vec1, vec2):
            s, carry = self._full_adder(a, b, carry)
            res.append(s)
        return res, carry

    def vec_add(self, vec1: list[int], vec2: list[int]) -> list[int]:
        return self._add_with_carry(vec1, vec2, self.CONST_FALSE)[0]

    def vec_sub(self, vec1: list[int], vec2: list[int]) -> list[int]:
        return self._add_with_carry(vec1, self.vec_not(vec2), self.CONST_TRUE)[0]

    def vec_neg(self, vec: list[int]) -> list[int]:
        return self.vec_sub(self.vec_const(0, len(vec)), vec)

    def vec_lt_unsigned(self, vec1: list[int], vec2: list[int]) -> int:
        # a < b iff a - b borrows, i.e. a + ~b + 1 produces no carry
        _, carry = self._add_with_carry(vec1, self.vec_not(vec2), self.CONST_TRUE)
        return -carry

    def vec_lt_signed(self, vec1: list[int], vec2: list[int]) -> int:
        # Flipping the sign bits maps signed order onto unsigned order
        if not vec1:
            return self.CONST_FALSE
        return self.vec_lt_unsigned(
            vec1[:-1] + [-vec1[-1]], vec2[:-1] + [-vec2[-1]]
        )

    def vec_set(self, vec1: list[int], vec2: list[int]) -> None:
        """Permanently constrain two vectors to be equal."""
        assert len(vec1) == len(vec2), "vec_set on vectors of different widths"
        for a, b in zip(vec1, vec2):
            self.assume(self.iff_(a, b))

    # Solving

    def assume(self, a: int) -> None:
        """Add `a` as a standing constraint for every later solve."""
        self.add_clause([a])

    def solve(self, *assumptions: int) -> bool:
        """Solve under the permanent clauses and the one-shot `assumptions`.

        Returns:
            bool: True if satisfiable.
        """
        self.num_solves += 1
        result = self.solver.solve(assumptions=list(assumptions))
        logger.debug(
            "Solve #%d with %d assumption(s): %s",
            self.num_solves,
            len(assumptions),
            "SAT" if result else "UNSAT",
        )
        return result

    def model_value(self, a: int) -> bool:
        """Value of `a` in the model of the last satisfiable solve."""
        model = self.solver.get_model()
        assert model is not None, "No model available."
        var = abs(a)
        value = var <= len(model) and model[var - 1] > 0
        return value if a > 0 else not value

    def delete(self) -> None:
        if self.solver is not None:
            self.solver.delete()
            self.solver = None

    def __enter__(self) -> "EzSAT":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.delete()
