"""
fieldplan: appointment scheduling engine for field-service planning.

Subpackages:
    * ``fieldplan.core.calendar``  - time model, grid layout, drag selection, week/month views
    * ``fieldplan.core.planning``  - planning items, recurrence, orchestration, reminders
    * ``fieldplan.api``            - FastAPI routers exposing the host callback surface
"""
__all__: list[str] = ["__version__"]

__version__ = "0.3.0"
