"""
ChatBoard - Minimal Persistent Message Board

A small SQLite-backed board where clients post short text messages,
optionally under a registered username, and read back the most recent ones.
"""

__version__ = "0.1.0"
__author__ = "ChatBoard Project"
