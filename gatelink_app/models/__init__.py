"""
Database models for the gated link shortener.

Gate progression is not persisted; the short link table is the only
durable entity.
"""

from .short_link import ShortLink

__all__ = ["ShortLink"]
