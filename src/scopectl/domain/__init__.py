"""Domain layer — packages, path ownership, change mapping, scope fragments.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
