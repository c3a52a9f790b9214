"""Infrastructure layer: config files on disk and shell commands.

This layer depends on stdlib, pydantic, and the domain models it loads.
It must never import from services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
