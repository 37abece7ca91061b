"""Building blocks for a small HTTP framework: run mode, path cleaning, response writing, renderers, access logs, error reports, trusted proxies and redirect rules."""

__version__ = "0.1.0"