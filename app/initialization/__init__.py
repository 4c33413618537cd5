"""
Initialization Module.

Startup logic shared by workers and scripts:
- logging: Logger configuration
"""

from app.initialization.logging import setup_logging

__all__ = ["setup_logging"]
