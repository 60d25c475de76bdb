"""HTTP API for reading reconciled server state."""
