"""
SmartHome API: Services Layer
=============================

Service Inventory:
    - SchemaValidator: compiled JSON schemas, fail-closed validate()
    - ResourceStore:   one MongoDB collection per resource type
    - Pipeline:        runs short-circuiting steps for one request
    - steps:           the create / list / read / delete steps and responders
"""
