"""Shared helpers for the xmlrelay services."""
