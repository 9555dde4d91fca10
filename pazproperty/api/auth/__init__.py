"""Caller identity resolution for HTTP requests."""

from pazproperty.api.auth.identity import get_caller_identity

__all__: list[str] = ["get_caller_identity"]
