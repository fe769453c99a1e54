"""appstrap — bootstrap new framework applications from a template."""

__version__ = "0.1.0"
