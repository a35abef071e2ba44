from pyequiv.jsoninterface import read_json_design
from pyequiv.passes import EquivInductPass, EquivStatusPass
from pyequiv.pyeqconfig import InductConfig
from pyequiv.verif import EquivInductWorker
from tests.designs.circuits import add_passthrough, add_desync, single
import logging

logging.basicConfig(
    filename='debug.log',
    filemode='w',
    level=logging.DEBUG,
    format='%(asctime)s:%(levelname)s:%(message)s'
)

# Create a logger
logger = logging.getLogger(__name__)

# Read a Yosys JSON netlist with one $equiv cell between two shift registers
design = read_json_design("tests/designs/shiftreg.json")

# One step is not enough: the first register stages are not compared
stats = EquivInductPass(InductConfig(seq=1)).execute(design)
print("Proven with -seq 1:", stats.success_counter)

# Two steps are
stats = EquivInductPass(InductConfig(seq=2)).execute(design)
print("Proven with -seq 2:", stats.success_counter)

status = EquivStatusPass().execute(design)
print("Unproven $equiv cells:", len(status.unproven))

# Drive the prover directly on a generated module
_, module, claim = single(add_passthrough)
other = add_desync(module)
with EquivInductWorker(module, list(module.cells.values()), [claim, other], 3) as worker:
    result = worker.run()
print("Induction result:", result.status.name, [c.name for c in result.proven])
