"""HTML parsers for the municipal listing and detail pages."""

from .listing_parser import (
    ListingParser,
    extract_detail_content,
    split_time_and_location,
)

__all__ = ["ListingParser", "extract_detail_content", "split_time_and_location"]
