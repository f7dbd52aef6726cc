"""HTTP API for nxview."""
