"""Services Layer — user accounts, subscription fetching, and the content cache.

Invariants:
    - Services take repositories or sessions as arguments (no module-level DB state)
    - ContentStore is passed in explicitly; services never create their own
"""
