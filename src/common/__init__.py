"""Shared utilities for ticker matcher services."""
