"""HTTP API for SheetDB."""
