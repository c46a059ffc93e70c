"""
Domain Layer

This package contains the restaurant and menu business rules, separated
from persistence concerns and infrastructure.

Structure:
- entities/: Business entities with identity and lifecycle
- value_objects/: Immutable value types without identity
- aggregates/: Aggregate roots that group related entities
- category_tree.py: Lookup-by-id helpers for flat category trees
"""
