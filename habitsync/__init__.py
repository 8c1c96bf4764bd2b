"""
habitsync - Habit tracking client with server reconciliation and progress metrics
"""
__version__ = "0.1.0"
