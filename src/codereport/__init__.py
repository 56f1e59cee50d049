"""codereport — normalize, merge and score static-analysis reports."""

__version__ = "0.1.0"
