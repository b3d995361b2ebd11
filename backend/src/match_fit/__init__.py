"""Match Fit lineup composition service."""

__version__ = "0.1.0"
