"""
tendbook - shared household chore tracking.

Each sync identifier owns one instance document holding tenders (people),
chores and a tending history log.  The package is layered:

- tendbook.core: errors, logging, settings, models, connection factory
- tendbook.store: keyed document storage (SQLite, in-memory)
- tendbook.ops: instance operations, merge-import, export
- tendbook.api: FastAPI transport
- tendbook.cli: Typer command line
"""

__version__ = "1.1.0"
