"""
Fixture designs: gold/gate pairs stitched together with $equiv cells.
"""

from pyequiv.rtlil import Cell, Design, Module, SigSpec


def wire(module: Module, name: str, width: int = 1, **kwargs) -> SigSpec:
    return SigSpec.from_wire(module.add_wire(name, width, **kwargs))


def add_equiv(module: Module, name: str, a: SigSpec, b: SigSpec) -> Cell:
    y = wire(module, f"{name}_y", len(a))
    return module.add_cell(name, "$equiv", {"A": a, "B": b, "Y": y})


def add_dff(module: Module, name: str, clk: SigSpec, d: SigSpec, q: SigSpec) -> Cell:
    return module.add_cell(
        name,
        "$dff",
        {"CLK": clk, "D": d, "Q": q},
        {"CLK_POLARITY": 1, "WIDTH": len(d)},
    )


def add_passthrough(module: Module, prefix: str = "") -> Cell:
    """gold = x & y, gate = y & x: equal regardless of history."""
    x = wire(module, f"{prefix}x", port_input=True)
    y = wire(module, f"{prefix}y", port_input=True)
    a = wire(module, f"{prefix}gold")
    b = wire(module, f"{prefix}gate")
    module.add_cell(f"{prefix}gold_and", "$_AND_", {"A": x, "B": y, "Y": a})
    module.add_cell(f"{prefix}gate_and", "$_AND_", {"A": y, "B": x, "Y": b})
    return add_equiv(module, f"{prefix}eq_pass", a, b)


def add_desync(module: Module, prefix: str = "") -> Cell:
    """Two registers loading independent inputs: once apart, never forced together."""
    clk = wire(module, f"{prefix}clk", port_input=True)
    in_a = wire(module, f"{prefix}in_a", port_input=True)
    in_b = wire(module, f"{prefix}in_b", port_input=True)
    qa = wire(module, f"{prefix}qa")
    qb = wire(module, f"{prefix}qb")
    add_dff(module, f"{prefix}reg_a", clk, in_a, qa)
    add_dff(module, f"{prefix}reg_b", clk, in_b, qb)
    return add_equiv(module, f"{prefix}eq_desync", qa, qb)


def add_delayed(module: Module, prefix: str = "") -> Cell:
    """Two separate two-stage shift registers fed by the same input.

    The outputs agree from the third cycle on, so the induction needs two
    steps: the intermediate stages are not observed by any $equiv cell.
    """
    clk = wire(module, f"{prefix}clk", port_input=True)
    x = wire(module, f"{prefix}x", port_input=True)
    r1 = wire(module, f"{prefix}gold_r1")
    s1 = wire(module, f"{prefix}gate_r1")
    qa = wire(module, f"{prefix}gold_q")
    qb = wire(module, f"{prefix}gate_q")
    add_dff(module, f"{prefix}gold_reg1", clk, x, r1)
    add_dff(module, f"{prefix}gold_reg2", clk, r1, qa)
    add_dff(module, f"{prefix}gate_reg1", clk, x, s1)
    add_dff(module, f"{prefix}gate_reg2", clk, s1, qb)
    return add_equiv(module, f"{prefix}eq_delayed", qa, qb)


def add_contradiction(module: Module, prefix: str = "") -> Cell:
    """gold = x, gate = ~x: the claim can never hold."""
    x = wire(module, f"{prefix}cx", port_input=True)
    nx = wire(module, f"{prefix}cnx")
    module.add_cell(f"{prefix}inv", "$_NOT_", {"A": x, "Y": nx})
    return add_equiv(module, f"{prefix}eq_contra", x, nx)


def add_counters(module: Module, prefix: str = "") -> list[Cell]:
    """Two 2-bit counters: gold counts with cnt + 1, gate with cnt - 3."""
    clk = wire(module, f"{prefix}clk", port_input=True)
    cnt_a = wire(module, f"{prefix}cnt_gold", 2)
    cnt_b = wire(module, f"{prefix}cnt_gate", 2)
    nxt_a = wire(module, f"{prefix}nxt_gold", 2)
    nxt_b = wire(module, f"{prefix}nxt_gate", 2)
    module.add_cell(
        f"{prefix}inc",
        "$add",
        {"A": cnt_a, "B": SigSpec.from_const(1, 1), "Y": nxt_a},
        {"A_SIGNED": 0, "B_SIGNED": 0, "A_WIDTH": 2, "B_WIDTH": 1, "Y_WIDTH": 2},
    )
    module.add_cell(
        f"{prefix}dec",
        "$sub",
        {"A": cnt_b, "B": SigSpec.from_const(3, 2), "Y": nxt_b},
        {"A_SIGNED": 0, "B_SIGNED": 0, "A_WIDTH": 2, "B_WIDTH": 2, "Y_WIDTH": 2},
    )
    add_dff(module, f"{prefix}cnt_gold_reg", clk, nxt_a, cnt_a)
    add_dff(module, f"{prefix}cnt_gate_reg", clk, nxt_b, cnt_b)
    return [
        add_equiv(module, f"{prefix}eq_cnt{i}", cnt_a[i : i + 1], cnt_b[i : i + 1])
        for i in range(2)
    ]


def add_unmodeled(module: Module, prefix: str = "") -> Cell:
    """gate is driven by a cell type without a SAT model."""
    x = wire(module, f"{prefix}ux", port_input=True)
    b = wire(module, f"{prefix}ub")
    module.add_cell(f"{prefix}mystery", "$blackbox_op", {"A": x, "Y": b})
    return add_equiv(module, f"{prefix}eq_unmodeled", x, b)


def single(builder, name: str = "top") -> tuple[Design, Module, object]:
    design = Design(builder.__name__)
    module = design.add_module(name)
    claims = builder(module)
    return design, module, claims
