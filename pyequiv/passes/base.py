"""
File: pyequiv/passes/base.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

import sys
import logging

from ..rtlil import Design, Selection

logger = logging.getLogger(__name__)


class Pass:
    """Base class for passes over a design.

    A pass is driven either programmatically through `execute`, or from a
    Yosys-style command line (`<name> [options] [selection]`) through
    `parse_args` followed by `execute`.
    """

    name: str = ""
    help: str = ""

    def parse_args(self, args: list[str]) -> Selection:
        """Consume pass options from `args` and return the selection.

        Args:
            args (list[str]): Command arguments, without the pass name.

        Returns:
            Selection: Selection built from the trailing arguments.
        """
        return self.extra_args(args, 0)

    def extra_args(self, args: list[str], argidx: int) -> Selection:
        for arg in args[argidx:]:
            if arg.startswith("-"):
                logger.error(f"Unknown option or option in arguments: {arg}")
                logger.error(f"Usage:\n{self.help}")
                sys.exit(1)
        return Selection(args[argidx:])

    def execute(self, design: Design, selection: Selection):
        raise NotImplementedError
