"""
PazProperty - Maintenance Declarations Core

Backend for the property-management maintenance workflow: tenants submit
declarations, administrators triage them and assign service providers,
providers schedule and report on interventions.

Every status change of a declaration flows through the transition engine,
which enforces the lifecycle graph, records an audit trail and dispatches
notifications on a best-effort basis.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
