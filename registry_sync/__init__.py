"""Synchronize a computed class schedule with an online attendance registry."""

__version__ = "0.1.0"
