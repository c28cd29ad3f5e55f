"""HTTP API for the Hindu Unity service."""
