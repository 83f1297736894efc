"""ScanLens: barcode scanning backend and multi-source product lookup."""

__version__ = "1.0.0"
