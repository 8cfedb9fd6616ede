"""Services Layer — orchestrates core checks around store IO.

Invariants:
    - Services receive their store by injection, never import a singleton
"""
