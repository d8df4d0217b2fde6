"""Settings, logging and exceptions shared across the client."""
