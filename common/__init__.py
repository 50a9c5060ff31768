"""Shared settings for the metrics services."""
