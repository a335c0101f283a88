"""
Find the senior leader (CEO, president, executive director, ...) behind each
email domain by searching the web.
"""

__version__ = "0.1.0"
