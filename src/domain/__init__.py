"""
Domain layer for contact form processing.

This layer contains:
- Data models (type-safe structures)
- Input sources (event body and query string extraction)
- Business logic (verify, render and dispatch pipeline)
- Result types (explicit outcome handling)
"""
