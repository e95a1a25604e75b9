"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class Role(str, Enum):
    DIRETOR = "diretor"
    GERENTE = "gerente"


class RemovalOutcome(str, Enum):
    DELETED = "deleted"
    DEACTIVATED = "deactivated"
