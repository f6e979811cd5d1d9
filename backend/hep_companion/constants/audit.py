"""
audit.py
- Purpose: Allowed values for application-level audit log rows.
"""

from enum import Enum


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    GENERATE = "generate"
    FEEDBACK = "feedback"
    SELECT = "select"


class ResourceType(str, Enum):
    PROMPT = "prompt"
    SUGGESTION = "suggestion"
    FEEDBACK = "feedback"
    CITATION = "citation"
    ORGANIZATION = "organization"
