"""Service package: configuration and process entry point."""
