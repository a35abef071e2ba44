"""
File: pyequiv/pyeqsetup.py

This file provides setup for PyEquiv CLI tasks.
See LICENSE.md for licensing information.
"""

import sys
import json
import logging
from typing import Optional

from jsonschema import validate
from jsonschema.exceptions import ValidationError
from pydantic import BaseModel

from .pyeqconfig import PYEqConfig, InductConfig, SolverConfig
from .rtlil import Design
from .jsoninterface import read_json_design

logger = logging.getLogger(__name__)


class PYEqArgs(BaseModel):
    """Arguments for PyEquiv tasks.

    Attributes:
        design (str): Path to the input JSON netlist.
        cfgpath (str): Path to a PyEquiv configuration file.
        outpath (str): Path to write the resulting netlist to.
        selection (list[str]): Selection patterns.
        seq (int | None): Overrides the configured induction depth.
        solver (str): Overrides the configured SAT solver.
    """

    design: str = ""  #: Path to the input JSON netlist
    cfgpath: str = ""  #: Path to a PyEquiv configuration file
    outpath: str = ""  #: Path to write the resulting netlist to
    selection: list[str] = []  #: Selection patterns
    seq: Optional[int] = None  #: Overrides the configured induction depth
    solver: str = ""  #: Overrides the configured SAT solver


PYEQ_CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        # Output netlist path
        "outpath": {"type": "string"},
        # Default selection patterns
        "selection": {"type": "array", "items": {"type": "string"}},
        "solver": {
            "type": "object",
            "properties": {
                # python-sat solver name
                "name": {"type": "string"},
            },
            "additionalProperties": False,
        },
        "induct": {
            "type": "object",
            "properties": {
                # Maximum number of time steps for equiv_induct
                "seq": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


def get_cfgfile(cfgpath: str) -> PYEqConfig:
    """Load and validate a PyEquiv configuration file.

    Args:
        cfgpath (str): Path to the configuration JSON file.

    Returns:
        PYEqConfig: The loaded and validated configuration.
    """
    with open(cfgpath, "r") as f:
        cfg = json.load(f)
    try:
        validate(instance=cfg, schema=PYEQ_CONFIG_SCHEMA)
    except ValidationError as e:
        logger.error(f"PyEquiv config schema validation failed: {e.message}")
        logger.error(
            f"Please check schema:\n{json.dumps(PYEQ_CONFIG_SCHEMA, indent=4, sort_keys=True, separators=(',', ': '))}"
        )
        sys.exit(1)
    return PYEqConfig(
        outpath=cfg.get("outpath", ""),
        selection=cfg.get("selection", []),
        solver=SolverConfig(**cfg.get("solver", {})),
        induct=InductConfig(**cfg.get("induct", {})),
    )


def get_pyeqconfig(args: PYEqArgs) -> PYEqConfig:
    """Create a PyEquiv configuration from arguments.

    Values given on the command line take precedence over the
    configuration file, which takes precedence over the defaults.

    Args:
        args (PYEqArgs): PyEquiv arguments.

    Returns:
        PYEqConfig: PyEquiv configuration.
    """
    if args.cfgpath != "":
        config = get_cfgfile(args.cfgpath)
    else:
        config = PYEqConfig()

    if args.outpath != "":
        config.outpath = args.outpath
    if args.selection:
        config.selection = list(args.selection)
    if args.seq is not None:
        if args.seq < 0:
            logger.error(f"Induction depth must be non-negative, got {args.seq}.")
            sys.exit(1)
        config.induct = InductConfig(seq=args.seq)
    if args.solver != "":
        config.solver = SolverConfig(name=args.solver)
    return config


def start(args: PYEqArgs) -> tuple[PYEqConfig, Design]:
    """Set up a PyEquiv task: build the configuration and read the design.

    Args:
        args (PYEqArgs): PyEquiv arguments.

    Returns:
        tuple: Tuple of (config, design).
    """
    config = get_pyeqconfig(args)
    design = read_json_design(args.design)
    logger.info(
        f"Read design {args.design} with {len(design.modules)} module(s)."
    )
    logger.debug(f"Configuration: {config}")
    return config, design
