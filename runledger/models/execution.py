"""
Execution Model
Database model for workflow execution records
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from datetime import datetime
from . import Base


class Execution(Base):
    """
    Execution Model

    One run of a workflow. Written by the execution engine, only read here.
    The id is assigned by the database and grows with creation order, so
    it doubles as the pagination cursor.
    """
    __tablename__ = "executions"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    workflow_id = Column(Integer, ForeignKey("workflows.id"), nullable=False, index=True)

    # Status: new, running, waiting, success, error, canceled, unknown
    status = Column(String(50), nullable=False, default="new", index=True)

    # Trigger origin: manual, webhook, trigger, retry...
    mode = Column(String(50), nullable=False, default="manual")

    # All timestamps are naive UTC
    started_at = Column(DateTime, nullable=True, index=True)
    stopped_at = Column(DateTime, nullable=True)
    wait_till = Column(DateTime, nullable=True)

    # Retry chain
    retry_of = Column(Integer, nullable=True)
    retry_success_id = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Execution(id={self.id}, workflow_id={self.workflow_id}, status='{self.status}')>"
