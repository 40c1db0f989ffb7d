"""Pydantic schemas for the coaching session API."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from agents.enhancement_agent import EnhancedResults
from archetypes import Phase
from interview_session import ArchetypeResults, Selection
from reflection_session import ReflectionState
from storage.sessions import ReflectionStatus


class CreateSessionReq(BaseModel):
    participant_name: str = Field(min_length=1)
    tenant_name: Optional[str] = None
    welcome_message: Optional[str] = None
    completion_message: Optional[str] = None


class CreateSessionResp(BaseModel):
    session_id: str


class MessageReq(BaseModel):
    message: Optional[str] = None
    selection: Optional[Selection] = None


class MessageResp(BaseModel):
    message: str
    phase: Phase
    current_question_index: int
    is_complete: bool


class ReflectReq(BaseModel):
    message: Optional[str] = None


class ReflectResp(BaseModel):
    message: str
    state: ReflectionState
    is_complete: bool
    is_enhanced: bool


class ResultsResp(BaseModel):
    session_id: str
    participant_name: str
    phase: Phase
    results: Optional[ArchetypeResults] = None
    reflection_status: ReflectionStatus
    enhanced_results: Optional[EnhancedResults] = None


class DeclineResp(BaseModel):
    session_id: str
    reflection_status: ReflectionStatus
