"""Console runner - drives a test engine and reports its results."""

__version__ = "0.1.0"
