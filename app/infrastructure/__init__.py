"""Infrastructure adapters: persistence, security."""
