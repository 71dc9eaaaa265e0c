"""Infrastructure layer — dependency graph engine, workspace, command templates.

This layer depends on stdlib and third-party libs (NetworkX, Jinja2, pluggy).
It must never import from services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
