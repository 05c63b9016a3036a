"""Use-case layer for orchestrating the destination upload workflow.

Each module coordinates domain objects and ports without performing transport
I/O directly, preserving MVVM + Hexagonal boundaries.
"""
