"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool and the documents schema.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
