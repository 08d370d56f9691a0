"""Built-in configuration tables for the tour."""
