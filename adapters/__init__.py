"""
adapters/ - Notification Delivery Layer
=======================================
Platform notifiers behind a common interface. Services only talk to
`adapters.base.Notifier`; the Telegram implementation is wired in main.py.
"""
