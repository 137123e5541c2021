"""
Custom exceptions for the storefront cart.
"""

class CartException(Exception):
    """Base exception for cart operations"""
    pass

class ValidationError(CartException):
    """Raised when cart input is rejected"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

class StorageError(CartException):
    """Raised when the storage medium fails to read or write"""
    pass
