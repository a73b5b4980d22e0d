# fieldplan/workers/__init__.py
"""
Celery background tasks.
Nothing is imported automatically; Celery loads fieldplan.workers.tasks via ``-A``.
"""
__all__: list[str] = ["tasks"]
