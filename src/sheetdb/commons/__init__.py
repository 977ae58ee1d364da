"""Shared helpers for SheetDB."""
