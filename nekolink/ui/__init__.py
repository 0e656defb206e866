"""
UI module initialization.
"""

from .console import ConsoleUI, rule

__all__ = ["ConsoleUI", "rule"]
