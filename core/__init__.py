"""Calorie target + macro split engine."""
