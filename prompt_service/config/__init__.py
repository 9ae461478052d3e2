"""Configuration module for the prompt service."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
