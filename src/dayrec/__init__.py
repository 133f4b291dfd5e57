"""dayrec: reconcile day-sheet deposit totals against bank statement lines."""

__version__ = "0.1.0"

# The CLI and the domain services pull in the database layer, so both are
# resolved on first access
_LAZY = {
    "main": "dayrec.cli.main",
    "ReconciliationService": "dayrec.domain.reconciliation",
    "create_sqlite_database": "dayrec.database.factories",
}


def __getattr__(name):
    if name in _LAZY:
        import importlib

        return getattr(importlib.import_module(_LAZY[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
