"""Command line interface for cmdshape."""
