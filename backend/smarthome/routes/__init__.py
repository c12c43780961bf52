"""
SmartHome API: Routes Package
=============================

Route Inventory:
    - resources.py: POST/GET /users, GET/DELETE /users/{key}
                    POST/GET /devices, GET/DELETE /devices/{key}
    - health.py:    GET /health

Routes only translate HTTP into a RequestContext; the pipeline steps in
smarthome.services.steps do the work.
"""
