"""
citybudget: headless engine for an interactive city-budget map

Loads zones and budget line items from CSV, keeps display handles for the
zones on screen in a recycling pool, tracks selection and drag, and projects
the impact of a proposed zone budget over time.
"""

__version__ = "0.1.0"
