"""
Utilities Module

Shared helpers for the agenda domain:
- Date helpers (dates.py)
- Logging (logger.py)
"""
