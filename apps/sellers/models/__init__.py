"""
Seller models module.
"""
from .seller import Seller

__all__ = [
    'Seller',
]
