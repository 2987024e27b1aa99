"""Infrastructure layer - database engine and logging."""
