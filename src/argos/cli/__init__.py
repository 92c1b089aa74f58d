"""CLI package for Argos."""
