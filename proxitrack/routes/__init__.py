"""HTTP routes for proxitrack."""

from .devices import devices_bp, init_app

__all__ = ['devices_bp', 'init_app']
