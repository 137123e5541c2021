"""
Storefront shopping cart: persisted cart state and view synchronization.
"""
