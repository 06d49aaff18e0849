"""Command-line interface for git-summary-ai."""
