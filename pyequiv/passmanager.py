"""
File: pyequiv/passmanager.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

import sys
import shlex
import logging
from dataclasses import dataclass

from .pyeqconfig import PYEqConfig
from .rtlil import Design, Selection
from .passes import PASSES, Pass, EquivInductPass
from .jsoninterface import write_json_design

logger = logging.getLogger(__name__)


@dataclass
class PassRecord:
    command: str
    result: object
    #: Did the pass change the design?
    changed: bool

    def __str__(self) -> str:
        return "PassRecord(%s, %s)" % (self.command, "changed" if self.changed else "unchanged")


class PassManager:
    """Runs Yosys-style pass commands on a design and records the results."""

    def __init__(self, design: Design, config: PYEqConfig = PYEqConfig()) -> None:
        self.design = design
        self.config = config
        self.records: list[PassRecord] = []

    def mk_pass(self, name: str) -> Pass:
        if name not in PASSES:
            logger.error(f"No such command: {name} (available: {', '.join(PASSES)})")
            sys.exit(1)
        if name == EquivInductPass.name:
            return EquivInductPass(self.config.induct, self.config.solver)
        return PASSES[name]()

    def run(self, command: str):
        """Run a single command, e.g. `equiv_induct -seq 2 top`.

        Returns:
            The result of the pass.
        """
        args = shlex.split(command)
        if not args:
            return None
        logger.debug("Running command: %s", command)
        p = self.mk_pass(args[0])
        selection = p.parse_args(args[1:])
        if selection.is_full() and self.config.selection:
            selection = Selection(self.config.selection)

        before = self.design.fingerprint()
        result = p.execute(self.design, selection)
        record = PassRecord(command, result, before != self.design.fingerprint())
        self.records.append(record)
        logger.debug("%s", record)
        return result

    def run_script(self, script: str) -> list:
        """Run `;`- or newline-separated commands; `#` starts a comment."""
        results = []
        for line in script.splitlines():
            line = line.split("#", 1)[0]
            for command in line.split(";"):
                if command.strip():
                    results.append(self.run(command.strip()))
        return results

    def save(self, path: str = "") -> None:
        path = path or self.config.outpath
        if path != "":
            write_json_design(self.design, path)
