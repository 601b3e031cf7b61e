"""
Testing - helpers for exercising autoconfigurations.
"""

from .runner import ContextRunner

__all__ = ["ContextRunner"]
