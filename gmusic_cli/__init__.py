"""
gmusic-cli: an asyncio client and command-line tool for the Google Music web API.
"""

__version__ = "0.1.0"
