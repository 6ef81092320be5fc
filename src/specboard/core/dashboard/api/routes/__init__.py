"""API route modules for the specboard dashboard."""
