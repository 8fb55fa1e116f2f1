"""Run tracker: workout log, training statistics and live sessions."""

__version__ = "0.1.0"
