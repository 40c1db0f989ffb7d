import json

import pytest

from config import AppConfig, load_config, resolve_routes
from config.registry import ENHANCEMENT_KEY, INTERVIEW_KEY, MODEL_KEYS, bind_model, get_model, unbind_model
from config.settings import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert settings.INTERVIEW_MAX_TOKENS == 1024
    assert settings.ENHANCEMENT_MAX_TOKENS == 4096
    assert settings.BACKFILL_DELAY_SECONDS == 1.0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("BACKFILL_DELAY_SECONDS", "0.25")
    monkeypatch.setenv("DEFAULT_COACH_NAME", "Northwind Coaching")
    settings = Settings(_env_file=None)
    assert settings.BACKFILL_DELAY_SECONDS == 0.25
    assert settings.DEFAULT_COACH_NAME == "Northwind Coaching"


def test_registry_bind_and_retrieve():
    marker = object()
    bind_model(INTERVIEW_KEY, lambda **_: marker)
    model = get_model(INTERVIEW_KEY)
    assert model() is marker


def test_registry_unbound_key_raises():
    unbind_model(ENHANCEMENT_KEY)
    with pytest.raises(KeyError):
        get_model(ENHANCEMENT_KEY)


def test_load_config_and_resolve_routes(tmp_path):
    path = tmp_path / "app_config.json"
    path.write_text(
        json.dumps(
            {
                "llm_routes": {
                    "fast": {"name": "fast", "base_url": "http://llm.local", "model": "small"},
                    "deep": {"name": "deep", "base_url": "http://llm.local", "model": "large", "sequential": True},
                },
                "registry": {
                    "models.interview_agent": "fast",
                    "models.reflection_agent": "fast",
                    "models.enhancement_agent": "deep",
                },
            }
        ),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert isinstance(cfg, AppConfig)
    routes = resolve_routes(cfg, MODEL_KEYS)
    assert routes[INTERVIEW_KEY].model == "small"
    assert routes[ENHANCEMENT_KEY].sequential is True
    assert routes[ENHANCEMENT_KEY].endpoint == "/v1/chat/completions"


def test_resolve_routes_reports_missing_entries():
    cfg = AppConfig(llm_routes={}, registry={INTERVIEW_KEY: "absent"})
    with pytest.raises(KeyError):
        resolve_routes(cfg, [INTERVIEW_KEY])
    with pytest.raises(KeyError):
        resolve_routes(cfg, [ENHANCEMENT_KEY])
