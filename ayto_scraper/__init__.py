"""Municipal website scraper: events, agenda, notices and news into PostgreSQL."""

__version__ = "1.0.0"
