"""CLI package for Library Lending"""
from .main import cli

__all__ = ['cli']
