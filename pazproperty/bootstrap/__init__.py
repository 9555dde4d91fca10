"""Bootstrap wiring: logging, database and port selection from environment."""
