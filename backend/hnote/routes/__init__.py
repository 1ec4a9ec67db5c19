# Routes package init
"""
hnote Backend — API Routes Package
===================================

Route Inventory:
    - notes.py:   GET/POST     /note
                  GET/PUT/DELETE /note/{id}
    - health.py:  GET          /            (static liveness text)
                  GET          /health      (store connectivity)

Routes stay thin: decode the request, call NoteService, pick the status code.
"""
