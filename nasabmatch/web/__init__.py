"""HTTP interface for nasabmatch."""
