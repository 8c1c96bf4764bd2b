"""
Session module
Bearer token storage and authentication mode
"""
from .store import SessionStore, TokenStorage, MemoryTokenStorage, TOKEN_KEY

__all__ = ['SessionStore', 'TokenStorage', 'MemoryTokenStorage', 'TOKEN_KEY']
