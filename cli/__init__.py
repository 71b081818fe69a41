"""CLI package for audioshelf"""
from .main import cli

__all__ = ['cli']
