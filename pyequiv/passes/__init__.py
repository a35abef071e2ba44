from .base import Pass
from .equivinduct import EquivInductPass, EquivInductStats
from .equivstatus import EquivStatusPass, EquivStatus
from .optcompare import OptComparePass, optimize_compares

#: Command name -> pass class
PASSES: dict[str, type[Pass]] = {
    p.name: p for p in (EquivInductPass, EquivStatusPass, OptComparePass)
}
