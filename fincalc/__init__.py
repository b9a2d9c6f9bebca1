"""Financial calculators: interest solver and credit simulator."""

__version__ = "0.1.0"
