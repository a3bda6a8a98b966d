"""Route optimization and resilience engine."""
