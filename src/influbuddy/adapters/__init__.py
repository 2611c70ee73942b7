"""Adapters: HTTP, Firebase, persistence and report exporters."""
