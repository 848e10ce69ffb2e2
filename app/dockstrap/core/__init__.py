"""Installation pipeline stages and supporting infrastructure."""
