"""Rewriter passes applied to each chunk."""

from .base import Rewriter
from .imports import VirtualImportRewriter
from .exports import ExportRewriter

__all__ = ["Rewriter", "VirtualImportRewriter", "ExportRewriter"]
