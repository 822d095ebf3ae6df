"""
Temporal Layer
==============

Injectable time source for everything time-driven in the navigator.
"""

from .clock import LogicalClock

__all__ = ['LogicalClock']
