"""Command-line interface for querywrap."""
