"""
MSP-Challenge client launcher.

Launches several MSP-Challenge clients while keeping system memory usage
under a configured ceiling, then kills them all on a single keypress.
"""

__version__ = "1.0.0"
