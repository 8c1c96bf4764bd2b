"""
Gateway module
HTTP access to the remote habit service
"""
from .client import HabitGateway, AUTH_MODES

__all__ = ['HabitGateway', 'AUTH_MODES']
