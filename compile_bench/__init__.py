"""
Compiler performance harness.

Synthesizes C/C++ sources that stress one compiler subsystem each, times
repeated compiles of them and writes per-configuration and comparison CSVs.
"""

__version__ = "1.0.0"
