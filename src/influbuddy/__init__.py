"""InfluBuddy: client for the influencer-partnership tracker backend."""

__version__ = "0.1.0"
