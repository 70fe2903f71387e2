"""Configuration package for the asset tracker service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
