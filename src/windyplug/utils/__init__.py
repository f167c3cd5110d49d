"""Utility helpers for windyplug."""

from .output import OutputFormatter

__all__ = ["OutputFormatter"]
