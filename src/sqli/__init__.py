"""Terminal workbench for writing and running saved SQL queries."""

__version__ = "0.1.0"
