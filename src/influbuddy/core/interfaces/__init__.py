"""Core contracts (Protocol) implemented by adapters."""

from influbuddy.core.interfaces.auth import TokenProvider

__all__ = ["TokenProvider"]
