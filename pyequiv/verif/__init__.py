from .equivinduct import EquivInductWorker, InductResult, InductStatus
