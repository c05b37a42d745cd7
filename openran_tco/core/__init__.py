"""
Core modules for OpenRAN TCO.

This package contains the computation engine: scaling resolution, cost
projection, discounting, summary building and parameter sweeps.
"""
