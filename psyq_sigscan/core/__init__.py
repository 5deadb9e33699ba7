"""Core utilities: settings, logging and the exception hierarchy."""
