"""Service layer for sites, stores and their membership."""
