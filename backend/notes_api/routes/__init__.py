# Routes package init
"""
Notes API — API Routes Package
================================

Route Inventory:
    - notes.py:   /notes, /notes/archived, /notes/{id}, /notes/{id}/archive
    - health.py:  GET /health

Routes stay THIN: they extract path/query/body, call NoteService, and
return the result. Errors propagate to the handlers registered in main.py.
"""
