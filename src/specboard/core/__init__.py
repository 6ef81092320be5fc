"""Core functionality for specboard."""
