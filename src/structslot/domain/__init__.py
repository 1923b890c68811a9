"""Domain layer — slots, structured types, and tree traversal.

This layer depends only on stdlib, pydantic, and :mod:`structslot.errors`.
It must never import from config, plugins, output, or the CLI.
"""
