"""
bulkgraph: Orchestration of bulk-synchronous-parallel graph computations.

Composes an optional vertex-program job and a sequence of map-reduce jobs
into a single one-shot submission, threading a shared computation memory
between them.
"""

__version__ = "0.1.0"
