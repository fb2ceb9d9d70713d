"""Maintenance calorie estimation and weekly budgeting."""

__version__ = "0.1.0"
