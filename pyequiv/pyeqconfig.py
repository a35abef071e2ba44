"""
File: pyequiv/pyeqconfig.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

from pydantic import BaseModel, Field


class SolverConfig(BaseModel):
    """Configuration for the SAT backend.

    Attributes:
        name (str): python-sat solver name, e.g. `glucose4`, `minisat22`
            or `cadical153`.
    """

    name: str = "glucose4"


class InductConfig(BaseModel):
    """Configuration for the equiv_induct pass.

    Attributes:
        seq (int): Maximum number of time steps considered by the induction.
    """

    seq: int = Field(default=4, ge=0)


class PYEqConfig(BaseModel):
    """PyEquiv configuration class.

    Attributes:
        outpath (str): Where to write the resulting netlist (empty: do not write).
        selection (list[str]): Default selection patterns.
        solver (SolverConfig): SAT backend configuration.
        induct (InductConfig): equiv_induct configuration.
    """

    outpath: str = ""
    selection: list[str] = []

    solver: SolverConfig = SolverConfig()
    induct: InductConfig = InductConfig()
