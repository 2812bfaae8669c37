"""coordkit: geocoding, coordinate formats and small geo calculations from the terminal."""

__version__ = "0.1.0"
