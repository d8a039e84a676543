"""
RSS ntfy - Poll RSS/Atom feeds and push new items to ntfy topics.

A Python application that periodically checks syndication feeds
and posts a plain-text notification for every newly published item.
"""

__version__ = "1.0.0"
