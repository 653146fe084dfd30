"""
db/ - Database Layer
====================
Connection provider and development schema bootstrap for PostgreSQL.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
