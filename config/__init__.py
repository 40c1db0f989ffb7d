"""Configuration package for the archetype discovery services."""
from .registry import (
    ENHANCEMENT_KEY,
    INTERVIEW_KEY,
    MODEL_KEYS,
    REFLECTION_KEY,
    bind_model,
    get_model,
    unbind_model,
)
from .routing import AppConfig, LlmRoute, load_config, resolve_routes
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "load_config",
    "resolve_routes",
    "ENHANCEMENT_KEY",
    "INTERVIEW_KEY",
    "MODEL_KEYS",
    "REFLECTION_KEY",
    "bind_model",
    "get_model",
    "unbind_model",
    "Settings",
    "settings",
]
