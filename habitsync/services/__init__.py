"""
Business logic services
"""
from . import session
from . import gateway
from . import metrics
from . import gamification
from . import reconciliation

__all__ = [
    'session',
    'gateway',
    'metrics',
    'gamification',
    'reconciliation'
]
