"""Utility helpers for reading delimited report cells."""
