"""Command-line interface for selloutctl."""
