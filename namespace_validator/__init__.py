"""Pull request gate for namespace declaration ownership."""

__version__ = "0.1.0"
