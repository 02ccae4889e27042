# Middleware package init
"""
ShipTrack Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every later log line can carry the ID
    - Logging measures the full handler time and sees the final status
    - CORS answers preflight OPTIONS requests from the configured origins

Authentication is NOT middleware: it is a FastAPI dependency on the shipment
routes (see shiptrack.security.dependencies), so public routes stay public.
"""
