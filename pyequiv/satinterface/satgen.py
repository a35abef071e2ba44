"""
File: pyequiv/satinterface/satgen.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

"""
    SatGen:
        Imports signals and cell behaviour into an EzSAT instance, one time
        step at a time. Cell models are registered per cell type with the
        @cellmodel decorator; a cell type without a model is reported to
        the caller, which decides how to handle the gap.
"""

import logging
from typing import Callable

from ..rtlil import Cell, SigBit, SigMap, SigSpec, State
from .ezsat import EzSAT

logger = logging.getLogger(__name__)


CellModel = Callable[["SatGen", Cell, int], None]

#: Cell type -> SAT model
CELL_MODELS: dict[str, CellModel] = {}


def cellmodel(*types: str):
    """Register the decorated function as the SAT model of `types`."""

    def decorator(fn: CellModel) -> CellModel:
        for t in types:
            assert t not in CELL_MODELS, f"Duplicate SAT model for {t}"
            CELL_MODELS[t] = fn
        return fn

    return decorator


class SatGen:
    """Time-indexed import of a module into an EzSAT instance.

    Attributes:
        ez (EzSAT): The SAT instance.
        sigmap (SigMap): Canonicalizer; all bits are imported canonically.
        prefix (str): Name prefix for the literals of this importer.
    """

    def __init__(self, ez: EzSAT, sigmap: SigMap, prefix: str = "") -> None:
        self.ez = ez
        self.sigmap = sigmap
        self.prefix = prefix

    def import_sig_bit(self, bit: SigBit, step: int) -> int:
        bit = self.sigmap(bit)
        if not bit.is_wire():
            if bit.data == State.S1:
                return self.ez.CONST_TRUE
            if bit.data == State.S0:
                return self.ez.CONST_FALSE
            # x and z are unconstrained
            return self.ez.literal()
        return self.ez.literal((self.prefix, step, bit))

    def import_sig_spec(self, sig: SigSpec, step: int) -> list[int]:
        return [self.import_sig_bit(b, step) for b in sig]

    def import_port(self, cell: Cell, port: str, step: int) -> list[int]:
        return self.import_sig_spec(cell.get_port(port), step)

    def import_cell(self, cell: Cell, step: int) -> bool:
        """Import the behaviour of `cell` at time `step`.

        Returns:
            bool: False if there is no SAT model for the cell type.
        """
        model = CELL_MODELS.get(cell.type)
        if model is None:
            return False
        logger.debug("Importing cell %s (%s) at step %d", cell.name, cell.type, step)
        model(self, cell, step)
        return True


def _signed(cell: Cell, *params: str) -> bool:
    return all(bool(cell.get_param(p, 0)) for p in params)


def _set_output(gen: SatGen, cell: Cell, step: int, value: list[int]) -> None:
    y = gen.import_port(cell, "Y", step)
    gen.ez.vec_set(y, gen.ez.vec_extend(value, len(y), False))


# Fine-grained gates


@cellmodel("$_BUF_", "$equiv")
def _model_buf(gen: SatGen, cell: Cell, step: int) -> None:
    a = gen.import_port(cell, "A", step)
    y = gen.import_port(cell, "Y", step)
    gen.ez.vec_set(y, a)


@cellmodel("$_NOT_")
def _model_not_gate(gen: SatGen, cell: Cell, step: int) -> None:
    a = gen.import_port(cell, "A", step)
    y = gen.import_port(cell, "Y", step)
    gen.ez.vec_set(y, gen.ez.vec_not(a))


_GATE_FUNCS: dict[str, Callable[[EzSAT, int, int], int]] = {
    "$_AND_": lambda ez, a, b: ez.and_(a, b),
    "$_NAND_": lambda ez, a, b: -ez.and_(a, b),
    "$_OR_": lambda ez, a, b: ez.or_(a, b),
    "$_NOR_": lambda ez, a, b: -ez.or_(a, b),
    "$_XOR_": lambda ez, a, b: ez.xor_(a, b),
    "$_XNOR_": lambda ez, a, b: ez.iff_(a, b),
    "$_ANDNOT_": lambda ez, a, b: ez.and_(a, -b),
    "$_ORNOT_": lambda ez, a, b: ez.or_(a, -b),
}


@cellmodel(*_GATE_FUNCS)
def _model_gate(gen: SatGen, cell: Cell, step: int) -> None:
    fn = _GATE_FUNCS[cell.type]
    a = gen.import_port(cell, "A", step)
    b = gen.import_port(cell, "B", step)
    y = gen.import_port(cell, "Y", step)
    gen.ez.vec_set(y, [fn(gen.ez, i, j) for i, j in zip(a, b)])


@cellmodel("$_MUX_")
def _model_mux_gate(gen: SatGen, cell: Cell, step: int) -> None:
    a = gen.import_port(cell, "A", step)
    b = gen.import_port(cell, "B", step)
    s = gen.import_port(cell, "S", step)
    y = gen.import_port(cell, "Y", step)
    gen.ez.vec_set(y, gen.ez.vec_ite(s[0], b, a))


# Word-level cells


@cellmodel("$not", "$pos", "$neg")
def _model_unary(gen: SatGen, cell: Cell, step: int) -> None:
    ez = gen.ez
    width = cell.get_param("Y_WIDTH", len(cell.get_port("Y")))
    a = ez.vec_extend(gen.import_port(cell, "A", step), width, _signed(cell, "A_SIGNED"))
    if cell.type == "$not":
        res = ez.vec_not(a)
    elif cell.type == "$neg":
        res = ez.vec_neg(a)
    else:
        res = a
    _set_output(gen, cell, step, res)


_REDUCE_FUNCS: dict[str, Callable[[EzSAT, list[int]], int]] = {
    "$reduce_and": lambda ez, a: ez.vec_reduce_and(a),
    "$reduce_or": lambda ez, a: ez.vec_reduce_or(a),
    "$reduce_bool": lambda ez, a: ez.vec_reduce_or(a),
    "$reduce_xor": lambda ez, a: ez.vec_reduce_xor(a),
    "$reduce_xnor": lambda ez, a: -ez.vec_reduce_xor(a),
    "$logic_not": lambda ez, a: -ez.vec_reduce_or(a),
}


@cellmodel(*_REDUCE_FUNCS)
def _model_reduce(gen: SatGen, cell: Cell, step: int) -> None:
    a = gen.import_port(cell, "A", step)
    _set_output(gen, cell, step, [_REDUCE_FUNCS[cell.type](gen.ez, a)])


@cellmodel("$and", "$or", "$xor", "$xnor", "$add", "$sub")
def _model_binary(gen: SatGen, cell: Cell, step: int) -> None:
    ez = gen.ez
    width = cell.get_param("Y_WIDTH", len(cell.get_port("Y")))
    signed = _signed(cell, "A_SIGNED", "B_SIGNED")
    a = ez.vec_extend(gen.import_port(cell, "A", step), width, signed)
    b = ez.vec_extend(gen.import_port(cell, "B", step), width, signed)
    match cell.type:
        case "$and":
            res = ez.vec_and(a, b)
        case "$or":
            res = ez.vec_or(a, b)
        case "$xor":
            res = ez.vec_xor(a, b)
        case "$xnor":
            res = ez.vec_iff(a, b)
        case "$add":
            res = ez.vec_add(a, b)
        case "$sub":
            res = ez.vec_sub(a, b)
    _set_output(gen, cell, step, res)


@cellmodel("$logic_and", "$logic_or")
def _model_logic(gen: SatGen, cell: Cell, step: int) -> None:
    ez = gen.ez
    a = ez.vec_reduce_or(gen.import_port(cell, "A", step))
    b = ez.vec_reduce_or(gen.import_port(cell, "B", step))
    res = ez.and_(a, b) if cell.type == "$logic_and" else ez.or_(a, b)
    _set_output(gen, cell, step, [res])


@cellmodel("$eq", "$ne", "$eqx", "$nex", "$lt", "$le", "$gt", "$ge")
def _model_compare(gen: SatGen, cell: Cell, step: int) -> None:
    ez = gen.ez
    a = gen.import_port(cell, "A", step)
    b = gen.import_port(cell, "B", step)
    signed = _signed(cell, "A_SIGNED", "B_SIGNED")
    width = max(len(a), len(b))
    a = ez.vec_extend(a, width, signed)
    b = ez.vec_extend(b, width, signed)
    lt = ez.vec_lt_signed if signed else ez.vec_lt_unsigned
    match cell.type:
        case "$eq" | "$eqx":
            res = ez.vec_eq(a, b)
        case "$ne" | "$nex":
            res = ez.vec_ne(a, b)
        case "$lt":
            res = lt(a, b)
        case "$le":
            res = -lt(b, a)
        case "$gt":
            res = lt(b, a)
        case "$ge":
            res = -lt(a, b)
    _set_output(gen, cell, step, [res])


@cellmodel("$mux")
def _model_mux(gen: SatGen, cell: Cell, step: int) -> None:
    a = gen.import_port(cell, "A", step)
    b = gen.import_port(cell, "B", step)
    s = gen.import_port(cell, "S", step)
    y = gen.import_port(cell, "Y", step)
    gen.ez.vec_set(y, gen.ez.vec_ite(s[0], b, a))


@cellmodel("$pmux")
def _model_pmux(gen: SatGen, cell: Cell, step: int) -> None:
    ez = gen.ez
    a = gen.import_port(cell, "A", step)
    b = gen.import_port(cell, "B", step)
    s = gen.import_port(cell, "S", step)
    y = gen.import_port(cell, "Y", step)
    width = len(a)
    res = a
    # Lower select bits take priority
    for i in reversed(range(len(s))):
        res = ez.vec_ite(s[i], b[i * width : (i + 1) * width], res)
    ez.vec_set(y, res)


# State elements


@cellmodel("$dff", "$ff", "$_DFF_P_", "$_DFF_N_", "$_FF_")
def _model_dff(gen: SatGen, cell: Cell, step: int) -> None:
    # Unconstrained in the first step: the initial state is arbitrary
    if step > 1:
        d = gen.import_port(cell, "D", step - 1)
        q = gen.import_port(cell, "Q", step)
        gen.ez.vec_set(q, d)


@cellmodel("$dffe", "$_DFFE_PP_", "$_DFFE_PN_", "$_DFFE_NP_", "$_DFFE_NN_")
def _model_dffe(gen: SatGen, cell: Cell, step: int) -> None:
    if step > 1:
        ez = gen.ez
        d = gen.import_port(cell, "D", step - 1)
        q_prev = gen.import_port(cell, "Q", step - 1)
        q = gen.import_port(cell, "Q", step)
        en_port = "EN" if cell.type == "$dffe" else "E"
        en = gen.import_port(cell, en_port, step - 1)[0]
        if cell.type == "$dffe":
            active_high = bool(cell.get_param("EN_POLARITY", 1))
        else:
            active_high = cell.type[-2] == "P"
        ez.vec_set(q, ez.vec_ite(en if active_high else -en, d, q_prev))


@cellmodel("$anyconst")
def _model_anyconst(gen: SatGen, cell: Cell, step: int) -> None:
    if step > 1:
        y_init = gen.import_port(cell, "Y", 1)
        y = gen.import_port(cell, "Y", step)
        gen.ez.vec_set(y, y_init)


@cellmodel("$anyseq")
def _model_anyseq(gen: SatGen, cell: Cell, step: int) -> None:
    # A fresh value in every step: nothing to constrain
    pass
