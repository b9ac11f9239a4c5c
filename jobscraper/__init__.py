"""Scrape LinkedIn and Drushim job postings, dedupe, score and store new ones."""

__version__ = "0.1.0"
