"""
models/ - Domain Layer
======================
Plain dataclasses for income records, reminder settings and derived
notifications, with their JSON (de)serialization.
"""
