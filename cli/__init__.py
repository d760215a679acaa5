"""Command-line interface for Deep Scrape."""
