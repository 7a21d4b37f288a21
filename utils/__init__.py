"""
utils/ - Shared Helpers
=======================
Logging, input validation and presentation formatting.
"""
