"""API request/response models (Pydantic v2)."""
