"""
Services module for LeadLens.
"""
from .personas import create_persona, update_persona, set_default_persona, delete_persona
from .summary import generate_project_summary, build_fallback_summary

__all__ = [
    "create_persona",
    "update_persona",
    "set_default_persona",
    "delete_persona",
    "generate_project_summary",
    "build_fallback_summary",
]
