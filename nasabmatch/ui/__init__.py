"""User interfaces for nasabmatch."""
