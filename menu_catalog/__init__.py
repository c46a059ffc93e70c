"""
Menu Catalog

Restaurant, menu and category catalog with consistent soft-delete
lifecycles, operating hours and category hierarchies.
"""

__version__ = "0.1.0"
