"""
SmartHome API: Application Package
==================================

Layers:

    ┌─────────────────────────────────────┐
    │    Routes (route table, health)     │  <- HTTP -> RequestContext
    ├─────────────────────────────────────┤
    │  Pipeline (steps, responders)       │  <- short-circuiting checks
    ├─────────────────────────────────────┤
    │  Store + Schema Validator           │  <- MongoDB / JSON Schema
    ├─────────────────────────────────────┤
    │  Database (Motor client lifecycle)  │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
