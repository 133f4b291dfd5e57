"""Domain layer for dayrec application."""

# Services import the database layer, which imports domain entities, so they
# are resolved lazily.
_SERVICES = {
    "DepositService": "dayrec.domain.deposit",
    "BankImportService": "dayrec.domain.bank_import",
    "SheetImportService": "dayrec.domain.sheet_import",
    "ImportLogService": "dayrec.domain.import_log",
    "ReconciliationService": "dayrec.domain.reconciliation",
    "TransactionService": "dayrec.domain.transaction",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
