"""
Workflow Model
Database models for workflow identity and sharing
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime
from . import Base


class Workflow(Base):
    """
    Workflow Model

    Only the identity and display name are read here; the graph
    definition belongs to the execution engine.
    """
    __tablename__ = "workflows"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Workflow(id={self.id}, name='{self.name}')>"


class WorkflowShare(Base):
    """
    Grants a principal (user, team, API key...) read access to a workflow
    and therefore to its executions.
    """
    __tablename__ = "workflow_shares"
    __table_args__ = (
        UniqueConstraint("workflow_id", "principal", name="uq_workflow_shares_workflow_principal"),
    )

    id = Column(Integer, primary_key=True)
    workflow_id = Column(Integer, ForeignKey("workflows.id"), nullable=False, index=True)
    principal = Column(String(255), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<WorkflowShare(workflow_id={self.workflow_id}, principal='{self.principal}')>"
