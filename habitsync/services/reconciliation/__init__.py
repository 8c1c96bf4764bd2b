"""
Reconciliation module
Application state and the controller that keeps it in sync with the server
"""
from .state import AppState, AuthMode, HabitDraft
from .controller import ReconciliationController, OperationResult

__all__ = [
    'AppState',
    'AuthMode',
    'HabitDraft',
    'ReconciliationController',
    'OperationResult'
]
