"""Domain services, kept separate from HTTP routes and socket handlers."""
