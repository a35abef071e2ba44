import logging
import sys
import unittest

from pyequiv.passes import (
    PASSES,
    EquivInductPass,
    EquivStatusPass,
    OptComparePass,
    optimize_compares,
)
from pyequiv.passmanager import PassManager
from pyequiv.pyeqconfig import InductConfig, PYEqConfig
from pyequiv.rtlil import Design, Selection, SigMap, SigSpec, State
from pyequiv.verif import InductStatus
from tests.designs.circuits import (
    add_counters,
    add_delayed,
    add_desync,
    add_equiv,
    add_passthrough,
    single,
    wire,
)

# Configure logging
h1 = logging.StreamHandler(sys.stdout)
h1.setLevel(logging.INFO)
h1.setFormatter(logging.Formatter("%(levelname)s::%(message)s"))
logging.basicConfig(level=logging.DEBUG, handlers=[h1])
logger = logging.getLogger(__name__)


def mixed_design() -> Design:
    design = Design("mixed")
    top = design.add_module("top")
    add_passthrough(top)
    add_desync(top)
    sub = design.add_module("sub")
    add_delayed(sub)
    return design


class EquivInductPassTest(unittest.TestCase):
    def test_stats(self):
        design = mixed_design()
        stats = EquivInductPass(InductConfig(seq=2)).execute(design)
        self.assertEqual(stats.found, {"top": 2, "sub": 1})
        self.assertEqual(stats.results["top"].status, InductStatus.FALLBACK)
        self.assertEqual(stats.results["sub"].status, InductStatus.PROVEN_ALL)
        self.assertEqual(stats.success_counter, 2)
        self.assertEqual(
            [c.name for c in stats.results["top"].proven], ["eq_pass"]
        )

    def test_rerun_is_noop(self):
        design, _, _ = single(add_counters)
        first = EquivInductPass().execute(design)
        self.assertEqual(first.success_counter, 2)
        fp = design.fingerprint()
        second = EquivInductPass().execute(design)
        self.assertEqual(second.found, {})
        self.assertEqual(second.success_counter, 0)
        self.assertEqual(design.fingerprint(), fp)

    def test_connected_claims_skipped(self):
        design, module, _ = single(add_passthrough)
        a = wire(module, "p")
        b = wire(module, "q")
        module.connect(b, a)
        add_equiv(module, "eq_connected", a, b)
        stats = EquivInductPass().execute(design)
        self.assertEqual(stats.found, {"top": 1})
        self.assertEqual(stats.results["top"].proven[0].name, "eq_pass")

    def test_selection_limits_model(self):
        # Without the AND gates both sides are free inputs
        design, _, claim = single(add_passthrough)
        stats = EquivInductPass().execute(design, Selection(["top/eq_*"]))
        self.assertEqual(stats.found, {"top": 1})
        self.assertEqual(stats.success_counter, 0)
        self.assertNotEqual(claim.get_port("B"), claim.get_port("A"))

    def test_selection_limits_claims(self):
        design = mixed_design()
        stats = EquivInductPass().execute(design, Selection(["sub"]))
        self.assertEqual(list(stats.found), ["sub"])
        self.assertEqual(stats.success_counter, 1)

    def test_parse_args(self):
        p = EquivInductPass()
        sel = p.parse_args(["-seq", "7", "top/eq_*"])
        self.assertEqual(p.config.seq, 7)
        self.assertEqual(str(sel), "top/eq_*")
        self.assertTrue(EquivInductPass().parse_args([]).is_full())

    def test_parse_args_errors(self):
        for args in (["-seq", "many"], ["-seq", "-1"], ["-depth", "3"], ["top", "-seq", "2"]):
            with self.assertRaises(SystemExit, msg=f"{args}"):
                EquivInductPass().parse_args(args)


class OptCompareTest(unittest.TestCase):
    def setUp(self):
        self.design = Design()
        self.m = self.design.add_module("top")
        self.a = wire(self.m, "a", 4, port_input=True)
        self.zero = SigSpec.from_const(0, 4)

    def compare(self, name, type, y_width, signed, b=None):
        return self.m.add_cell(
            name,
            type,
            {"A": self.a, "B": self.zero if b is None else b, "Y": wire(self.m, f"{name}_y", y_width)},
            {
                "A_SIGNED": int(signed),
                "B_SIGNED": int(signed),
                "A_WIDTH": 4,
                "B_WIDTH": 4,
                "Y_WIDTH": y_width,
            },
        )

    def test_rewrites(self):
        lt_s = self.compare("lt_s", "$lt", 1, True)
        lt_u = self.compare("lt_u", "$lt", 2, False)
        ge_s = self.compare("ge_s", "$ge", 2, True)
        ge_u = self.compare("ge_u", "$ge", 1, False)
        other = self.compare("lt_one", "$lt", 1, True, SigSpec.from_const(1, 4))

        count = OptComparePass().execute(self.design)
        self.assertEqual(count, 4)
        self.assertEqual(list(self.m.cells), ["lt_one", "$not$1"])
        self.assertIs(self.m.cells["lt_one"], other)

        sigmap = SigMap(self.m)
        msb = sigmap(self.a[3])
        self.assertEqual(sigmap(lt_s.get_port("Y")[0]), msb)
        self.assertEqual(sigmap(lt_u.get_port("Y")), SigSpec.from_const(0, 2))
        self.assertEqual(sigmap(ge_u.get_port("Y")), SigSpec.from_const(1, 1))

        inv = self.m.cells["$not$1"]
        self.assertEqual(inv.get_port("A"), SigSpec([self.a[3]]))
        self.assertEqual(inv.get_port("Y"), ge_s.get_port("Y")[0:1])
        self.assertEqual(sigmap(ge_s.get_port("Y")[1]), SigSpec.from_const(0, 1)[0])

    def test_mixed_signedness_is_unsigned(self):
        cell = self.compare("lt", "$lt", 1, False)
        cell.parameters["A_SIGNED"] = 1
        self.assertEqual(optimize_compares(self.m, [cell]), 1)
        self.assertEqual(SigMap(self.m)(cell.get_port("Y")[0]).data, State.S0)

    def test_nonconst_and_empty(self):
        self.compare("lt_var", "$lt", 1, True, wire(self.m, "b", 4))
        empty = self.m.add_cell(
            "lt_empty",
            "$lt",
            {"A": SigSpec(), "B": SigSpec(), "Y": wire(self.m, "e_y")},
            {"A_SIGNED": 1, "B_SIGNED": 1, "A_WIDTH": 0, "B_WIDTH": 0, "Y_WIDTH": 1},
        )
        self.assertEqual(OptComparePass().execute(self.design), 0)
        self.assertIn(empty.name, self.m.cells)

    def test_selection(self):
        self.compare("lt_s", "$lt", 1, True)
        self.compare("ge_s", "$ge", 1, True)
        self.assertEqual(OptComparePass().execute(self.design, Selection(["top/ge_*"])), 1)
        self.assertIn("lt_s", self.m.cells)


class EquivStatusTest(unittest.TestCase):
    def test_counts(self):
        design = mixed_design()
        EquivInductPass(InductConfig(seq=2)).execute(design)
        status = EquivStatusPass().execute(design)
        self.assertEqual(
            sorted(c.name for _, c in status.proven), ["eq_delayed", "eq_pass"]
        )
        self.assertEqual([(m, c.name) for m, c in status.unproven], [("top", "eq_desync")])

    def test_assert(self):
        design = mixed_design()
        p = EquivStatusPass()
        sel = p.parse_args(["-assert", "top"])
        self.assertTrue(p.assert_proven)
        with self.assertRaises(SystemExit):
            p.execute(design, sel)

    def test_assert_all_proven(self):
        design, _, _ = single(add_counters)
        EquivInductPass().execute(design)
        status = EquivStatusPass(assert_proven=True).execute(design)
        self.assertEqual(len(status.proven), 2)
        self.assertEqual(status.unproven, [])


class PassManagerTest(unittest.TestCase):
    def test_registry(self):
        self.assertEqual(set(PASSES), {"equiv_induct", "equiv_status", "opt_compare"})

    def test_script(self):
        pm = PassManager(mixed_design())
        results = pm.run_script(
            "equiv_induct -seq 2; equiv_status  # report\n\n# only comments\nopt_compare"
        )
        self.assertEqual(len(results), 3)
        self.assertEqual(
            [r.command for r in pm.records],
            ["equiv_induct -seq 2", "equiv_status", "opt_compare"],
        )
        self.assertEqual([r.changed for r in pm.records], [True, False, False])
        self.assertEqual(results[0].success_counter, 2)
        self.assertEqual(len(results[1].unproven), 1)
        self.assertEqual(results[2], 0)

    def test_config(self):
        config = PYEqConfig(selection=["sub"], induct=InductConfig(seq=1))
        pm = PassManager(mixed_design(), config)
        stats = pm.run("equiv_induct")
        # Only the delayed pair is selected and one step is too few for it
        self.assertEqual(list(stats.found), ["sub"])
        self.assertEqual(stats.success_counter, 0)
        # An explicit selection overrides the configured one
        stats = pm.run("equiv_induct -seq 2 top")
        self.assertEqual(list(stats.found), ["top"])

    def test_unknown_command(self):
        pm = PassManager(Design())
        self.assertIsNone(pm.run("   "))
        with self.assertRaises(SystemExit):
            pm.run("equiv_simple")


if __name__ == "__main__":
    unittest.main()
