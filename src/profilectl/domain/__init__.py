"""Domain layer — field definitions, validation rules, and user models.

This layer depends only on stdlib, pydantic, and email-validator.
It must never import from services, infrastructure, commands, or config.
"""
