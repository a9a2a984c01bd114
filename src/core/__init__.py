"""
Core: prime store, checked exponent arithmetic, exponent-vector rationals.

Prime store is the only shared mutable state; everything else is a value.
"""
