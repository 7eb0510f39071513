"""headliner: multi-source tech headline aggregation."""

__version__ = "0.1.0"
