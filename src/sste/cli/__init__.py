"""Command line frontend for sste."""
