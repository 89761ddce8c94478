"""Infrastructure: database and repository implementations."""
