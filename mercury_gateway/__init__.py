"""Mercury gateway package."""

__all__ = ["app", "core", "deps", "routes"]
