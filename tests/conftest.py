"""
Pytest fixtures for RunLedger tests

This module provides shared fixtures for all tests:
- Database session fixtures (in-memory SQLite)
- Workflow / execution factories
- Service wiring
"""

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from runledger.models import Base, Execution, Workflow, WorkflowShare
from runledger.core.directory import WorkflowDirectory
from runledger.core.service import ExecutionQueryService
from runledger.core.store import ExecutionStore


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def db_session():
    """
    Create an in-memory SQLite database for testing.
    Each test gets a fresh database that's torn down after the test.
    """
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        engine.dispose()


# ============================================================================
# FACTORY FIXTURES
# ============================================================================

@pytest.fixture
def create_workflow(db_session):
    """
    Factory: create_workflow(name=None, shared_with=()) -> Workflow
    """
    counter = {"n": 0}

    def _create(name=None, shared_with=()):
        counter["n"] += 1
        workflow = Workflow(name=name or f"Test Workflow {counter['n']}")
        db_session.add(workflow)
        db_session.flush()
        for principal in shared_with:
            db_session.add(WorkflowShare(workflow_id=workflow.id, principal=principal))
        db_session.commit()
        db_session.refresh(workflow)
        return workflow

    return _create


@pytest.fixture
def create_execution(db_session):
    """
    Factory: create_execution(workflow, **overrides) -> Execution

    Defaults to a successful manual run that started and stopped now.
    Executions are inserted one at a time so ids follow call order.
    """

    def _create(workflow, **overrides):
        now = datetime.utcnow()
        values = {
            "status": "success",
            "mode": "manual",
            "started_at": now,
            "stopped_at": now,
        }
        values.update(overrides)
        execution = Execution(workflow_id=workflow.id, **values)
        db_session.add(execution)
        db_session.commit()
        db_session.refresh(execution)
        return execution

    return _create


# ============================================================================
# SERVICE FIXTURES
# ============================================================================

@pytest.fixture
def store(db_session):
    return ExecutionStore(db_session)


@pytest.fixture
def directory(db_session):
    return WorkflowDirectory(db_session)


@pytest.fixture
def service(store, directory):
    return ExecutionQueryService(store, directory)


# ============================================================================
# UTILITY FIXTURES
# ============================================================================

@pytest.fixture
def capture_logs(caplog):
    """
    Fixture to capture logs for testing
    """
    import logging
    caplog.set_level(logging.DEBUG)
    return caplog
