"""Request and response schemas for the tendbook API."""
