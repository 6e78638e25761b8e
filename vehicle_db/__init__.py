"""Vehicle pricing dataset builder (FIPE API + seed catalogs)."""

__version__ = "2.0.0"
