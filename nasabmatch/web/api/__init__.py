"""REST API for placement matching."""
