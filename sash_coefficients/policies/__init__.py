"""
Swappable resolution policies.

Bucketing decides which grid value (or blend of values) a clamped
(width, height) maps to. Fallback decides which category substitutes for one
the system does not carry. The Resolver only talks to the abstract bases.
"""
