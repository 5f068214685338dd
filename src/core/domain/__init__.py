"""Domain models and entities.

Why here:
- Pure, strict data structures (Pydantic v2) live in this package.
- The domain knows nothing about HTTP, DNS sockets or the CLI.
"""
