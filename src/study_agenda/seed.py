"""Bundled sample agenda used on first run."""
from pathlib import Path

from study_agenda.codec import state_from_dict
from study_agenda.importer import read_document
from study_agenda.models import AgendaState

CONTENT_DIR = Path(__file__).parent / "content"
SAMPLE_AGENDA = CONTENT_DIR / "sample_agenda.json"


def is_seeded(state: AgendaState) -> bool:
    """Check whether the state already has disciplines to plan."""
    return bool(state.disciplines)


def sample_state() -> AgendaState:
    """Sample disciplines and settings, with no plans yet."""
    return state_from_dict(read_document(str(SAMPLE_AGENDA)))
