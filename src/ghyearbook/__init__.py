"""Aggregate a GitHub user's yearly activity into stats, achievements and a clearance level."""

__version__ = "0.1.0"
