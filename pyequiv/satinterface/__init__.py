from .ezsat import EzSAT
from .satgen import SatGen, CELL_MODELS, cellmodel
