"""HTTP boundary of the service."""
