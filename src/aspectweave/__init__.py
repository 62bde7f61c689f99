"""AspectJ binary weaving step for Android builds."""

__version__ = "0.1.0"
