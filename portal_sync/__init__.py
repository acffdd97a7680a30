"""portal-sync: migrate company profiles from a listing page into the logo upload portal."""

__version__ = "0.1.0"
