"""
File: pyequiv/rtlil/design.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

"""
    In-memory circuit graph:
        SigBit:
            A single bit, either a wire bit or a constant
        SigSpec:
            An ordered (LSB first) vector of SigBits
        Wire, Cell, Module, Design:
            The netlist hierarchy, modelled after RTLIL
"""

import enum
import hashlib
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

import dill as pickle

logger = logging.getLogger(__name__)


class State(enum.Enum):
    """Constant bit values."""

    S0 = "0"
    S1 = "1"
    Sx = "x"
    Sz = "z"


class Wire:
    """A named multi-bit net inside a module.

    Attributes:
        name (str): Name of the wire.
        width (int): Number of bits.
        port_input (bool): Is the wire a module input?
        port_output (bool): Is the wire a module output?
    """

    def __init__(
        self,
        name: str,
        width: int = 1,
        port_input: bool = False,
        port_output: bool = False,
    ) -> None:
        self.name = name
        self.width = width
        self.port_input = port_input
        self.port_output = port_output
        self.attributes: dict[str, Union[int, str]] = {}

    def __repr__(self) -> str:
        return f"Wire({self.name}, {self.width})"


@dataclass(frozen=True)
class SigBit:
    """A single signal bit: a (wire, offset) pair or a constant."""

    wire: Optional[Wire] = None
    offset: int = 0
    data: Optional[State] = None

    @staticmethod
    def const(state: State) -> "SigBit":
        return SigBit(data=state)

    def is_wire(self) -> bool:
        return self.wire is not None

    def __str__(self) -> str:
        if self.wire is None:
            return f"1'{self.data.value}"
        if self.wire.width == 1:
            return self.wire.name
        return f"{self.wire.name}[{self.offset}]"


class SigSpec:
    """An ordered vector of signal bits, least significant bit first."""

    def __init__(self, bits: Iterable[SigBit] = ()) -> None:
        self.bits: list[SigBit] = list(bits)

    @classmethod
    def from_wire(
        cls, wire: Wire, offset: int = 0, width: Optional[int] = None
    ) -> "SigSpec":
        if width is None:
            width = wire.width - offset
        assert offset + width <= wire.width, f"Slice out of range for {wire.name}"
        return cls(SigBit(wire, i) for i in range(offset, offset + width))

    @classmethod
    def from_const(cls, value: int, width: int) -> "SigSpec":
        return cls(
            SigBit.const(State.S1 if (value >> i) & 1 else State.S0)
            for i in range(width)
        )

    @classmethod
    def from_state(cls, state: State, width: int) -> "SigSpec":
        return cls(SigBit.const(state) for _ in range(width))

    def __len__(self) -> int:
        return len(self.bits)

    def __iter__(self):
        return iter(self.bits)

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return SigSpec(self.bits[idx])
        return self.bits[idx]

    def __setitem__(self, idx: int, bit: SigBit) -> None:
        self.bits[idx] = bit

    def __add__(self, other: "SigSpec") -> "SigSpec":
        # Concatenation, self provides the low bits
        return SigSpec(self.bits + other.bits)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SigSpec):
            return NotImplemented
        return self.bits == other.bits

    def __repr__(self) -> str:
        return "{" + " ".join(str(b) for b in reversed(self.bits)) + "}"

    def copy(self) -> "SigSpec":
        return SigSpec(self.bits)

    def is_fully_const(self) -> bool:
        return all(not b.is_wire() for b in self.bits)

    def is_fully_zero(self) -> bool:
        return all(b.data == State.S0 for b in self.bits)

    def is_fully_def(self) -> bool:
        return all(b.data in (State.S0, State.S1) for b in self.bits)

    def as_int(self) -> int:
        assert self.is_fully_def(), f"SigSpec {self} is not a defined constant."
        return sum(1 << i for i, b in enumerate(self.bits) if b.data == State.S1)

    def to_single_sigbit(self) -> SigBit:
        assert len(self.bits) == 1, f"Expected a single bit, found {len(self.bits)}."
        return self.bits[0]


class Cell:
    """An operation instance in a module.

    Attributes:
        name (str): Name of the cell.
        type (str): Cell type tag, e.g. `$and` or `$equiv`.
        connections (dict[str, SigSpec]): Port name to signal.
        parameters (dict[str, int | str]): Widths, signedness flags, etc.
    """

    def __init__(
        self,
        name: str,
        type: str,
        connections: Optional[dict[str, SigSpec]] = None,
        parameters: Optional[dict[str, Union[int, str]]] = None,
    ) -> None:
        self.name = name
        self.type = type
        self.connections: dict[str, SigSpec] = dict(connections or {})
        self.parameters: dict[str, Union[int, str]] = dict(parameters or {})
        self.attributes: dict[str, Union[int, str]] = {}

    def has_port(self, port: str) -> bool:
        return port in self.connections

    def get_port(self, port: str) -> SigSpec:
        return self.connections[port]

    def set_port(self, port: str, sig: SigSpec) -> None:
        self.connections[port] = sig.copy()

    def get_param(self, param: str, default=None):
        return self.parameters.get(param, default)

    def __repr__(self) -> str:
        return f"Cell({self.name}, {self.type})"


class Module:
    """A module: wires, cells and direct connections between signals."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.wires: dict[str, Wire] = {}
        self.cells: dict[str, Cell] = {}
        self.connections: list[tuple[SigSpec, SigSpec]] = []
        self.attributes: dict[str, Union[int, str]] = {}
        self._autoidx = 0

    def new_name(self, prefix: str = "auto") -> str:
        """Generate a fresh internal object name."""
        while True:
            self._autoidx += 1
            name = f"${prefix}${self._autoidx}"
            if name not in self.wires and name not in self.cells:
                return name

    def add_wire(
        self,
        name: str,
        width: int = 1,
        port_input: bool = False,
        port_output: bool = False,
    ) -> Wire:
        assert name not in self.wires, f"Wire {name} already exists in {self.name}."
        wire = Wire(name, width, port_input, port_output)
        self.wires[name] = wire
        return wire

    def wire(self, name: str) -> Wire:
        return self.wires[name]

    def add_cell(
        self,
        name: str,
        type: str,
        connections: Optional[dict[str, SigSpec]] = None,
        parameters: Optional[dict[str, Union[int, str]]] = None,
    ) -> Cell:
        assert name not in self.cells, f"Cell {name} already exists in {self.name}."
        cell = Cell(name, type, connections, parameters)
        self.cells[name] = cell
        return cell

    def add_not(
        self, name: str, sig_a: SigSpec, sig_y: SigSpec, is_signed: bool = False
    ) -> Cell:
        return self.add_cell(
            name,
            "$not",
            {"A": sig_a, "Y": sig_y},
            {
                "A_SIGNED": int(is_signed),
                "A_WIDTH": len(sig_a),
                "Y_WIDTH": len(sig_y),
            },
        )

    def remove(self, cell: Cell) -> None:
        del self.cells[cell.name]

    def connect(self, lhs: SigSpec, rhs: SigSpec) -> None:
        assert len(lhs) == len(rhs), f"Width mismatch connecting {lhs} and {rhs}."
        self.connections.append((lhs.copy(), rhs.copy()))

    def ports(self) -> list[Wire]:
        return [w for w in self.wires.values() if w.port_input or w.port_output]

    def __repr__(self) -> str:
        return f"Module({self.name})"


class Design:
    """A collection of modules."""

    def __init__(self, name: str = "design") -> None:
        self.name = name
        self.modules: dict[str, Module] = {}

    def add_module(self, name: str) -> Module:
        assert name not in self.modules, f"Module {name} already exists."
        module = Module(name)
        self.modules[name] = module
        return module

    def module(self, name: str) -> Module:
        return self.modules[name]

    def fingerprint(self) -> str:
        """Hash of the full netlist; changes whenever a pass rewrites the design."""
        return hashlib.md5(pickle.dumps(list(self.modules.values()))).hexdigest()
