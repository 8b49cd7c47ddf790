# Middleware package init
"""
ReviewShare Backend — Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: abusive clients are rejected before any work
    2. Request ID: correlation id for logs and error bodies
    3. Logging: method, path, status and duration with the request id
    4. CORS: FastAPI's CORSMiddleware (handles preflight)

    Responses travel the chain in reverse, so the X-Request-ID header and the
    logged status/duration are set on the way out.
"""
