"""Order Manager REST API."""
