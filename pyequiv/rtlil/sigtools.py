"""
File: pyequiv/rtlil/sigtools.py

This file is a part of the PyEquiv tool.
See LICENSE.md for licensing information.
"""

import logging
from typing import Optional, Union

from .design import Module, SigBit, SigSpec

logger = logging.getLogger(__name__)


class SigMap:
    """Maps signal bits to canonical representatives.

    Bits that are connected (directly or through a chain of module
    connections) share one representative. A constant always becomes the
    representative of its class, so that a wire driven by a constant maps
    to that constant.
    """

    def __init__(self, module: Optional[Module] = None) -> None:
        self.parent: dict[SigBit, SigBit] = {}
        if module is not None:
            for lhs, rhs in module.connections:
                self.add(lhs, rhs)

    def _find(self, bit: SigBit) -> SigBit:
        root = bit
        while root in self.parent:
            root = self.parent[root]
        # Path compression
        while bit != root:
            nxt = self.parent[bit]
            self.parent[bit] = root
            bit = nxt
        return root

    def add_bit(self, bit_a: SigBit, bit_b: SigBit) -> None:
        root_a = self._find(bit_a)
        root_b = self._find(bit_b)
        if root_a == root_b:
            return
        if not root_a.is_wire() and not root_b.is_wire():
            logger.warning("Conflicting constant drivers %s and %s.", root_a, root_b)
            return
        if not root_b.is_wire():
            self.parent[root_a] = root_b
        else:
            self.parent[root_b] = root_a

    def add(self, sig_a: SigSpec, sig_b: SigSpec) -> None:
        assert len(sig_a) == len(sig_b), f"Width mismatch: {sig_a} vs {sig_b}"
        for bit_a, bit_b in zip(sig_a, sig_b):
            self.add_bit(bit_a, bit_b)

    def __call__(self, sig: Union[SigSpec, SigBit]) -> Union[SigSpec, SigBit]:
        if isinstance(sig, SigBit):
            return self._find(sig)
        return SigSpec(self._find(b) for b in sig)
