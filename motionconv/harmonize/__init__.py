"""Axis/unit harmonization and recording grouping."""
