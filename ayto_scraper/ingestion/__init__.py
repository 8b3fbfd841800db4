"""Scraping and ingestion pipeline for the municipal listing pages."""
