"""Storage of per-place measurements.

- repository.py: query contract, row types and lookup errors
- memory.py: in-process implementation used by default and in tests
"""
