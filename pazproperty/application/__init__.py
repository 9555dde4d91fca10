"""Application layer: ports (interfaces) and services (use cases)."""
