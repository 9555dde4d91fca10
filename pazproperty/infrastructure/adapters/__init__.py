"""Production adapters: SQLAlchemy persistence and webhook notifications."""
