"""Reconciliation of an installation root against a filelist."""
from fv_patcher.core.config import WritePolicy
from fv_patcher.reconcile.reconciler import PassResult, ReconcileReport, Reconciler

__all__ = [
    "PassResult",
    "ReconcileReport",
    "Reconciler",
    "WritePolicy",
]
