"""
Forum Privacy.

Locates, exports and erases the data a discussion forum keeps about its users.
"""

__version__ = "1.0.0"
