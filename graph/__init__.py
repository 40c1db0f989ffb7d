"""LangGraph turn graph for the interview and reflection agents."""
from .state import TurnPayload
from .build import build_graph, run_interview_turn, run_reflection_turn

__all__ = ["TurnPayload", "build_graph", "run_interview_turn", "run_reflection_turn"]
