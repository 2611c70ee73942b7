"""Domain records and entities.

Pydantic v2 models mirroring the backend's REST payloads. The domain does not
know about HTTP, the CLI or Firebase: only partners, campaigns and posts.
"""
