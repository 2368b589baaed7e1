"""
notestack: API Routes Package
===============================

Route Inventory:
    - health.py:   GET /healthz                  (both services)
    - notes.py:    POST /notes, GET /notes,
                   DELETE /notes/{id}            (notes API)
    - journal.py:  GET /, POST /save, GET /notes (journal service)

Routes stay thin: pull data out of the request, call one service method,
choose the status code.
"""
