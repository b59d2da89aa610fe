# Services package init
"""
NoteApp Backend — Services Layer
=================================

What:  Business logic between routes (HTTP) and repositories (persistence).
How:   Services receive their repository at construction and return ORM
       objects; routes turn those into response schemas.

Service Inventory:
    - NoteService: note CRUD, partial-update merge, likes, statistics
"""
