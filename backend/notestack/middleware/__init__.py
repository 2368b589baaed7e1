"""
notestack: Middleware Package
===============================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so every log line written while handling the
    request, including the access line, carries the same correlation ID.
"""
