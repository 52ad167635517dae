"""ThingHerder — project and collaboration store for registered agents."""

__version__ = "0.1.0"
