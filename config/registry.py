"""In-memory model registry for agent components."""
from typing import Any, Callable, Dict

_REGISTRY: Dict[str, Callable[..., Any]] = {}


def bind_model(key: str, fn: Callable[..., Any]) -> None:
    """Bind a callable implementation to a registry key."""
    _REGISTRY[key] = fn


def get_model(key: str) -> Callable[..., Any]:
    """Retrieve a callable from the registry.

    Raises:
        KeyError: If no callable has been bound for ``key``.
    """

    if key not in _REGISTRY:
        raise KeyError(f"Model not bound in registry: {key}")
    return _REGISTRY[key]


def unbind_model(key: str) -> None:
    """Drop a binding; unknown keys are ignored."""
    _REGISTRY.pop(key, None)


INTERVIEW_KEY = "models.interview_agent"
REFLECTION_KEY = "models.reflection_agent"
ENHANCEMENT_KEY = "models.enhancement_agent"

MODEL_KEYS = (INTERVIEW_KEY, REFLECTION_KEY, ENHANCEMENT_KEY)
