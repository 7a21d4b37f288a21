"""
security/ - Access Control
==========================
Handler decorators that keep the bot private to its owner.
"""
