"""Populate the kind registry on import."""
from .builtin import register_builtin_kinds

register_builtin_kinds()
