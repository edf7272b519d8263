"""
Mutation hooks fired by repositories around create and update.
"""

from .hooks import CompositeHooks, EntityHooks, LoggingHooks

__all__ = [
    "CompositeHooks",
    "EntityHooks",
    "LoggingHooks",
]
