"""Input record validation."""
