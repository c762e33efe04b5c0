"""Utility helpers for the memory book service."""

from .logging import setup_logging

__all__ = ["setup_logging"]
