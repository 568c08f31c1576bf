"""Pandemic board data."""
