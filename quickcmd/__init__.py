"""quickcmd: workspace project detection and command catalog filtering."""

__version__ = "0.1.0"
