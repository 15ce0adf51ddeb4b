"""Wiki parser functions for circular navigation lists and URL slugs."""

__version__ = "0.1.0"
