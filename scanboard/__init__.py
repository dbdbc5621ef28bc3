"""Command-line consumption layer for the CT scan dashboard client."""
