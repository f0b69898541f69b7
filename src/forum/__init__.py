"""Web forum backend API."""
