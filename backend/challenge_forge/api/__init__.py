"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured camelCase JSON responses

Design Decisions:
    - Thin routes delegate to services (ADR: pure core between two IO edges)
"""
