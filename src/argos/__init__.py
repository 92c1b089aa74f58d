"""Argos: aquaculture inference-run and fish-count recording API."""

__version__ = "0.1.0"
