"""Domain layer for PazProperty declarations.

Holds the declaration lifecycle model, the status registry and the domain
error taxonomy. Nothing in here depends on infrastructure.
"""
