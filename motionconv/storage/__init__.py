"""Conversion pipeline driver and output rendering."""
