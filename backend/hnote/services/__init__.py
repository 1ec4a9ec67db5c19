# Services package init
"""
hnote Backend — Services Layer
===============================

What:  Business logic between routes (HTTP) and the note store (persistence).
How:   Services receive the store at construction and return schema objects;
       routes build them per request from `request.app.state.store`.

Service Inventory:
    - NoteService: note CRUD, timestamp rules, record → wire mapping
"""
