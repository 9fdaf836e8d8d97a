# Middleware package init
"""
Microblog Backend: Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first: every later log line can carry the correlation id
    - Logging: records method, path, status and duration per request
"""
