"""
Application layer - use cases, DTOs and service factories.

Use cases are the only entry point for API handlers and the CLI.
"""
