"""
Logging module for the launcher.
This module provides the root logger setup shared by every component.
"""

from .setup import setup_logging

__all__ = ["setup_logging"]
