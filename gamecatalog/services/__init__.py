"""Sync policies and persistence services."""
