"""HTTP routes for SealRegistry."""
