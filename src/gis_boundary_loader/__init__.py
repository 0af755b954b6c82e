"""Load Natural Earth country and admin-1 boundaries into PostGIS."""

__version__ = "0.1.0"
