# Middleware package init
"""
Blog Backend: Middleware Package
=================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: assign or propagate X-Request-ID for correlation
    2. Logging: log method, path, status and duration with that ID
"""
