"""Command line interface for dvcli."""
