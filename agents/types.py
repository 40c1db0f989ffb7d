"""Shared type definitions for agents."""
from typing import Literal, Optional

from pydantic import BaseModel

from interview_session.state import SessionState
from reflection_session.state import ReflectionState

Role = Literal["user", "assistant"]


class AgentError(RuntimeError):
    """A conversational turn could not produce a reply; state was not advanced."""


class TenantContext(BaseModel):
    display_name: str
    welcome_message: Optional[str] = None
    completion_message: Optional[str] = None


class ChatMessage(BaseModel):
    role: Role
    content: str


class AgentTurn(BaseModel):
    message: str
    session_state: SessionState
    is_complete: bool


class ReflectionTurn(BaseModel):
    message: str
    state: ReflectionState
    is_complete: bool
