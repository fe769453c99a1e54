"""
Domain models — Pydantic types for the bootstrap engine.

All models are re-exported here for convenient access:

    from appstrap.core.models import Configuration, StepResult, Severity
"""

from appstrap.core.models.config import (
    Configuration,
    MysqlDatabase,
    PostgresDatabase,
    SkippedDatabase,
    SqliteDatabase,
)
from appstrap.core.models.step import PipelineState, Severity, StepResult
from appstrap.core.models.template import GeneratedFile

__all__ = [
    # config.py
    "Configuration",
    "MysqlDatabase",
    "PostgresDatabase",
    "SkippedDatabase",
    "SqliteDatabase",
    # template.py
    "GeneratedFile",
    # step.py
    "PipelineState",
    "Severity",
    "StepResult",
]
