"""hrc - a curl-like HTTP client for the command line."""

__version__ = "0.1.0"
