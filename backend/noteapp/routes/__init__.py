# Routes package init
"""
NoteApp Backend — API Routes Package
=====================================

Route Inventory:
    - notes.py:   /api/notes/...   (CRUD, search, statistics, likes)
    - health.py:  GET /health      (service and database health)

Routes stay thin: extract request data, call the service, return the
response model. Business rules live in services.
"""
