"""
Prompt Service - REST backend for the prompt gallery.

Serves prompt listings (with a two-tier listing cache), prompt details,
submissions and votes over a SQLAlchemy store.
"""

__version__ = "0.1.0"
