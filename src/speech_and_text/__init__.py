"""HTTP front end for Google Cloud Speech-to-Text recognition."""

__version__ = "0.1.0"
