"""Command-line interface: argument parsing, the single-file run and result display."""
