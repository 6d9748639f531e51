"""Service layer — lint operations returning ServiceResult.

Services may import from domain, rules, and infrastructure layers.
They must never import from commands or output.
"""
