"""Doc Cloud CLI package."""
