"""Service layer — impact resolution and command planning returning ServiceResult.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
