"""Support code for the command-line interface."""
