from .design import State, Wire, SigBit, SigSpec, Cell, Module, Design
from .sigtools import SigMap
from .selection import Selection
