"""Documentation site assembly, static content serving and registry data models."""

__version__ = "0.1.0"