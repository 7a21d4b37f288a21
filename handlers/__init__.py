"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler parses command arguments, delegates to
the service stored in `context.bot_data` and sends the response back.
No business logic lives here.
"""
