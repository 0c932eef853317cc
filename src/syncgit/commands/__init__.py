"""CLI command implementations for syncgit."""
