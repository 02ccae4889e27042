# Services package init
"""
ShipTrack Backend — Business Logic Services
=============================================

What:  Service layer containing all business logic, independent of HTTP.
How:   Each service handles one domain; all are stateless singletons that
       receive the request's database session as an argument.

Services:
    - UserService:      registration and login
    - ShipmentService:  create, track, list, status updates
"""
