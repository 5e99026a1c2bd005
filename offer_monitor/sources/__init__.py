"""Page-level helpers used by the listing scraper."""
