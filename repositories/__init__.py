"""
repositories/ - Data Access Layer
==================================
Each repository owns one or more documents of the record store.
Repositories read whole JSON documents and return domain model objects;
every mutation writes the whole document back.
"""
