"""Version information for dockercli."""

__version__ = "0.3.0"
