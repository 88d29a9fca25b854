"""goalpath: savings-goal projections and index trend analysis."""

__version__ = "0.1.0"
