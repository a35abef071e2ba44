"""
PyEquiv: temporal-induction proofs of $equiv cells in sequential circuits.
"""
