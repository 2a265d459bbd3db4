"""Core types, configuration, logging and errors for stripehooks."""
