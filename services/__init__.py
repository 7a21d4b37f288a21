"""
services/ - Business Logic Layer
================================
Reminder policy, notification reconciliation, aggregations and the
services that run one user action each.
"""
