"""Domain services for habits."""
