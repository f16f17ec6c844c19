"""UnboundedFigures - a social site for mathematical writeups."""

__version__ = "0.1.0"
