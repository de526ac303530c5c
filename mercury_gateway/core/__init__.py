"""Core services for the Mercury gateway."""
