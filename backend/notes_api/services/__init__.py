# Services package init
"""
Notes API — Services Layer
============================

Service Inventory:
    - NoteService: the note store facade (create, list, get, update,
      archive, delete) over an explicitly passed AsyncSession

Services are testable without HTTP: tests call them with a session from
a temporary SQLite database.
"""
