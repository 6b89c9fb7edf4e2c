"""
Pydantic schemas for query input and result output

Field names are snake_case in Python and camelCase on the wire
(model_dump(by_alias=True)); both spellings are accepted on input.
"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union

Id = Union[int, str]


# ============================================================================
# QUERY SCHEMAS
# ============================================================================

class PageRange(BaseModel):
    """Limit plus at most one exclusive cursor"""
    limit: int = Field(..., description="Maximum rows returned; <= 0 returns none")
    last_id: Optional[Id] = Field(None, alias="lastId", description="Only ids below this one")
    first_id: Optional[Id] = Field(None, alias="firstId", description="Only ids above this one")

    class Config:
        populate_by_name = True


class RangeQuery(BaseModel):
    """Filtered, paginated execution query"""
    kind: Literal["range"] = "range"
    status: Optional[List[str]] = Field(None, description="Status whitelist; empty means any")
    workflow_id: Optional[Id] = Field(None, alias="workflowId")
    accessible_workflow_ids: List[Id] = Field(
        ...,
        alias="accessibleWorkflowIds",
        description="Workflows the caller may see; always enforced"
    )
    started_before: Optional[str] = Field(None, alias="startedBefore")
    started_after: Optional[str] = Field(None, alias="startedAfter")
    range: PageRange

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "kind": "range",
                "status": ["success", "error"],
                "workflowId": 12,
                "accessibleWorkflowIds": [12, 14],
                "startedAfter": "2020-07-01",
                "range": {"limit": 20, "lastId": 4711}
            }
        }


# ============================================================================
# RESULT SCHEMAS
# ============================================================================

class ExecutionSummary(BaseModel):
    """Read-only projection of one execution"""
    id: int
    workflow_id: int = Field(..., alias="workflowId")
    workflow_name: Optional[str] = Field(None, alias="workflowName")
    mode: str
    retry_of: Optional[int] = Field(None, alias="retryOf")
    status: str
    started_at: Optional[str] = Field(None, alias="startedAt")
    stopped_at: Optional[str] = Field(None, alias="stoppedAt")
    wait_till: Optional[str] = Field(None, alias="waitTill")
    retry_success_id: Optional[int] = Field(None, alias="retrySuccessId")

    class Config:
        populate_by_name = True
        frozen = True


class RangeResult(BaseModel):
    """Page of summaries plus the cursor-independent total"""
    count: int
    estimated: bool
    results: List[ExecutionSummary]
