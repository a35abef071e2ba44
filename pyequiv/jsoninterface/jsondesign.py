"""
File: pyequiv/jsoninterface/jsondesign.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

"""
    Reading and writing designs in the Yosys JSON netlist format
    (`write_json` / `read_json`): modules with ports, cells and netnames,
    where every bit is either a net index or one of "0", "1", "x", "z".
"""

import sys
import json
import logging
from typing import Union

from jsonschema import validate
from jsonschema.exceptions import ValidationError

from ..rtlil import Design, Module, SigBit, SigMap, SigSpec, State

logger = logging.getLogger(__name__)


BITS_SCHEMA = {
    "type": "array",
    "items": {
        "anyOf": [
            {"type": "integer", "minimum": 0},
            {"enum": ["0", "1", "x", "z"]},
        ]
    },
}

NETLIST_SCHEMA = {
    "type": "object",
    "properties": {
        "creator": {"type": "string"},
        "modules": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "attributes": {"type": "object"},
                    "parameter_default_values": {"type": "object"},
                    "ports": {
                        "type": "object",
                        "additionalProperties": {
                            "type": "object",
                            "properties": {
                                "direction": {"enum": ["input", "output", "inout"]},
                                "bits": BITS_SCHEMA,
                            },
                            "required": ["direction", "bits"],
                        },
                    },
                    "cells": {
                        "type": "object",
                        "additionalProperties": {
                            "type": "object",
                            "properties": {
                                "hide_name": {"type": "integer"},
                                "type": {"type": "string"},
                                "parameters": {"type": "object"},
                                "attributes": {"type": "object"},
                                "port_directions": {"type": "object"},
                                "connections": {
                                    "type": "object",
                                    "additionalProperties": BITS_SCHEMA,
                                },
                            },
                            "required": ["type", "connections"],
                        },
                    },
                    "netnames": {
                        "type": "object",
                        "additionalProperties": {
                            "type": "object",
                            "properties": {
                                "hide_name": {"type": "integer"},
                                "bits": BITS_SCHEMA,
                                "attributes": {"type": "object"},
                            },
                            "required": ["bits"],
                        },
                    },
                },
            },
        },
    },
    "required": ["modules"],
}


def _parse_param(value: Union[int, str]) -> Union[int, str]:
    # Yosys writes integers as binary strings and pads real strings with a space
    if isinstance(value, str) and value and set(value) <= set("01xz"):
        return int(value.replace("x", "0").replace("z", "0"), 2)
    if isinstance(value, str):
        return value.rstrip(" ")
    return value


def _format_param(value: Union[int, str]) -> str:
    if isinstance(value, int):
        width = max(32, value.bit_length() + 1)
        return format(value & ((1 << width) - 1), f"0{width}b")
    if value and set(value) <= set("01xz"):
        return value + " "
    return value


def _read_module(module: Module, mdata: dict) -> None:
    netbits: dict[int, SigBit] = {}

    def bind(wire_bit: SigBit, b: Union[int, str]) -> None:
        if isinstance(b, str):
            module.connect(SigSpec([wire_bit]), SigSpec([SigBit.const(State(b))]))
        elif b in netbits:
            module.connect(SigSpec([wire_bit]), SigSpec([netbits[b]]))
        else:
            netbits[b] = wire_bit

    def to_sig(bits: list) -> SigSpec:
        sig = SigSpec()
        for b in bits:
            if isinstance(b, str):
                sig.bits.append(SigBit.const(State(b)))
                continue
            if b not in netbits:
                # A net that no netname refers to
                wire = module.add_wire(module.new_name("net"))
                netbits[b] = SigBit(wire, 0)
            sig.bits.append(netbits[b])
        return sig

    ports = mdata.get("ports", {})
    # Visible names first so they become the representatives of their nets
    netnames = sorted(
        mdata.get("netnames", {}).items(), key=lambda kv: kv[1].get("hide_name", 0)
    )
    for wname, ndata in netnames:
        direction = ports.get(wname, {}).get("direction", "")
        wire = module.add_wire(
            wname,
            len(ndata["bits"]),
            port_input=direction in ("input", "inout"),
            port_output=direction in ("output", "inout"),
        )
        for i, b in enumerate(ndata["bits"]):
            bind(SigBit(wire, i), b)

    for pname, pdata in ports.items():
        if pname in module.wires:
            continue
        wire = module.add_wire(
            pname,
            len(pdata["bits"]),
            port_input=pdata["direction"] in ("input", "inout"),
            port_output=pdata["direction"] in ("output", "inout"),
        )
        for i, b in enumerate(pdata["bits"]):
            bind(SigBit(wire, i), b)

    for cname, cdata in mdata.get("cells", {}).items():
        cell = module.add_cell(
            cname,
            cdata["type"],
            {port: to_sig(bits) for port, bits in cdata["connections"].items()},
            {k: _parse_param(v) for k, v in cdata.get("parameters", {}).items()},
        )
        cell.attributes = dict(cdata.get("attributes", {}))

    module.attributes = dict(mdata.get("attributes", {}))


def design_from_json(data: dict, name: str = "design") -> Design:
    """Build a Design from a parsed Yosys JSON netlist.

    Args:
        data (dict): The parsed JSON document.
        name (str): Name of the design.

    Returns:
        Design: The design.
    """
    try:
        validate(instance=data, schema=NETLIST_SCHEMA)
    except ValidationError as e:
        logger.error(f"Netlist schema validation failed: {e.message}")
        logger.error(f"Offending element: {json.dumps(e.instance)}")
        sys.exit(1)

    design = Design(name)
    for modname, mdata in data["modules"].items():
        _read_module(design.add_module(modname), mdata)
        logger.debug("Read module %s", modname)
    return design


def read_json_design(path: str, name: str = "") -> Design:
    """Read a Yosys JSON netlist from `path`."""
    with open(path, "r") as f:
        data = json.load(f)
    return design_from_json(data, name or path)


def design_to_json(design: Design) -> dict:
    """Serialize a Design to the Yosys JSON netlist format."""
    modules = {}
    for module in design.modules.values():
        sigmap = SigMap(module)
        netids: dict[SigBit, int] = {}

        def to_bits(sig: SigSpec) -> list:
            bits = []
            for b in sigmap(sig):
                if not b.is_wire():
                    bits.append(b.data.value)
                else:
                    # Net indices 0 and 1 are reserved
                    bits.append(netids.setdefault(b, len(netids) + 2))
            return bits

        ports = {}
        netnames = {}
        for wire in module.wires.values():
            bits = to_bits(SigSpec.from_wire(wire))
            if wire.port_input or wire.port_output:
                if wire.port_input and wire.port_output:
                    direction = "inout"
                else:
                    direction = "input" if wire.port_input else "output"
                ports[wire.name] = {"direction": direction, "bits": bits}
            netnames[wire.name] = {
                "hide_name": int(wire.name.startswith("$")),
                "bits": bits,
                "attributes": dict(wire.attributes),
            }

        cells = {}
        for cell in module.cells.values():
            cells[cell.name] = {
                "hide_name": int(cell.name.startswith("$")),
                "type": cell.type,
                "parameters": {k: _format_param(v) for k, v in cell.parameters.items()},
                "attributes": dict(cell.attributes),
                "connections": {p: to_bits(s) for p, s in cell.connections.items()},
            }

        modules[module.name] = {
            "attributes": dict(module.attributes),
            "ports": ports,
            "cells": cells,
            "netnames": netnames,
        }
    return {"creator": "pyequiv", "modules": modules}


def write_json_design(design: Design, path: str) -> None:
    """Write `design` to `path` as a Yosys JSON netlist."""
    with open(path, "w") as f:
        json.dump(design_to_json(design), f, indent=2)
    logger.info(f"Design written to {path}.")
