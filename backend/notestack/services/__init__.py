"""
notestack: Services Layer
===========================

Service Inventory:
    - NoteService:    notes API (trim + presence checks, then NoteStore)
    - JournalService: journal service (empty-body check, then JournalFile)

Services receive their storage handle in the constructor; routes obtain
services through FastAPI dependencies built from app.state.
"""
