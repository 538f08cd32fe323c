"""
Core domain models and contracts.

This module contains the foundational building blocks that are independent
of the storage backend and of the gating engine.
"""
