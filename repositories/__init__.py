"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for its domain entities.
Repositories receive raw rows from the database and return domain model objects.
"""
