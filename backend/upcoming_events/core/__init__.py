"""Core settings, logging, middleware and display strings."""
