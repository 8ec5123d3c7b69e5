"""Infrastructure adapters: storage and remote services."""
