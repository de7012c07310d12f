"""Multi-tenant vehicle listing backend: SEO URLs, slugs and redirects."""

__version__ = "1.0.0"
