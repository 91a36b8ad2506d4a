"""Trip planning service: routed itineraries with discovered optional stops."""

__version__ = "1.0.0"
