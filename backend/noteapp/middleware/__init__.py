# Middleware package init
"""
NoteApp Backend — Middleware Package
=====================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and any error handler can
    read the correlation ID.
"""
