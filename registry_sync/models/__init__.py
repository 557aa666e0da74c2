"""Data models shared by matching, schedule and registry code."""
