"""Performance benchmarks for secantgd.

Compares evaluation counts and wall time of the secant learning-rate scaling
against classic backtracking on standard test functions.
"""
