# Routes package init
"""
ShipTrack Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:       POST  /api/auth/register, POST /api/auth/login   (public)
    - shipments.py:  POST  /api/shipments                             (bearer)
                     GET   /api/shipments/track/{tracking_number}     (bearer)
                     GET   /api/shipments/my-shipments                (bearer)
                     GET   /api/shipments/all                         (bearer, admin)
                     PATCH /api/shipments/{tracking_number}/status    (bearer, admin)
    - health.py:     GET   /api/health                                (public)

Routes stay thin: extract input, call a service, return its response model.
Errors are raised as ShipTrackError subclasses and formatted by the global
handlers in main.py.
"""
