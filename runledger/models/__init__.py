"""
Models module - SQLAlchemy database models
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import models after Base is defined to avoid circular imports
from .workflow import Workflow, WorkflowShare  # noqa: E402
from .execution import Execution  # noqa: E402

__all__ = ["Base", "Workflow", "WorkflowShare", "Execution"]
