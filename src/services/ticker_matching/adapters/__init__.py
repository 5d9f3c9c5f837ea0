"""Registry data sources for the ticker matcher."""
