"""Command implementations for the depswap CLI."""
