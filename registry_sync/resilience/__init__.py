"""Fault tolerance for registry requests."""
