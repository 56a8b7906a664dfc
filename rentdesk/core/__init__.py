"""Core utilities: configuration, clock, errors, security, dependencies."""
