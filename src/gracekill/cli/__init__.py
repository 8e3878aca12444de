"""Command line interface for gracekill."""
