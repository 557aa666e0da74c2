"""Expansion of recurring lessons into dated scheduled occurrences."""
