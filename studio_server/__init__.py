"""Site studio server: bridge decision advisor and data-query assistant."""
