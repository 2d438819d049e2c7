"""refsync command-line interface."""
