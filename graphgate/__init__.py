"""Schema-driven access layer over a property-graph store."""

__version__ = "0.1.0"
