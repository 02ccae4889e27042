# Security package init
"""
ShipTrack Backend — Security Package
======================================

What:  Password hashing, access tokens and the request authentication gate.

Modules:
    - passwords.py:     bcrypt hash/verify
    - tokens.py:        JWT issue/verify → AuthenticatedIdentity
    - dependencies.py:  get_current_identity (FastAPI dependency)
"""
