"""Development helpers (local stub service)."""
