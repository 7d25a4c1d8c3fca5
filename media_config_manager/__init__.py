"""
Media Config Manager

Configuration lifecycle management for a media server process.
Provides versioned document loading, logger hot-reload, and config persistence.
"""

__version__ = "1.0.0"
__author__ = "Media Server Team"
