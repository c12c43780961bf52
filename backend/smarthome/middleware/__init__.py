"""
SmartHome API: Middleware Package
=================================

Middleware Chain:
    Request -> [Request ID] -> [Logging] -> [CORS] -> Route Handler

Request ID runs first so the access log line and any pipeline halt logged
during the request carry the same ID.
"""
