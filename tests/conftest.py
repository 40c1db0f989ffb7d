import json
import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from storage.migrate import migrate
from config.settings import settings
from config.registry import ENHANCEMENT_KEY, INTERVIEW_KEY, REFLECTION_KEY, bind_model


ENHANCED_PAYLOAD = {
    "personalizedDefaultNarrative": "Under pressure you steady the room before anyone moves.",
    "personalizedAuthenticNarrative": "When grounded you map where the team is heading.",
    "personalizedTensionInsights": "Calming others first can delay the direction you want to set.",
    "reflectionThemes": ["Steadiness", "Direction"],
    "personalizedGuidance": "Name the destination before you slow the pace.",
    "meaningfulQuotes": [{"quote": "I hold back my ideas", "context": "Holding back under strain"}],
}


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture
def enhanced_payload():
    return dict(ENHANCED_PAYLOAD)


@pytest.fixture
def fake_models():
    bind_model(INTERVIEW_KEY, lambda **_: "Thanks, here is the next question.")
    bind_model(REFLECTION_KEY, lambda **_: "What stands out to you about that?")
    bind_model(ENHANCEMENT_KEY, lambda **_: json.dumps(ENHANCED_PAYLOAD))
    return True
