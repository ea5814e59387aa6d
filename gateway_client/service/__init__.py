"""Service-layer entry points (debugging CLI)."""
