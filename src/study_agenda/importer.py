"""Reading and writing agenda documents."""
import json
from dataclasses import replace
from pathlib import Path

from loguru import logger

from study_agenda.codec import (
    disciplines_from_list, document_errors, settings_from_dict, state_from_dict, state_to_dict,
)
from study_agenda.errors import DocumentError
from study_agenda.models import AgendaState


def read_document(file_path: str) -> dict:
    """Parse a .json or .yaml/.yml file; anything else is read as JSON."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    if suffix in (".yaml", ".yml"):
        import yaml
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentError(f"{path.name} is not valid YAML: {e}") from e
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentError(f"{path.name} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DocumentError(f"{path.name} must contain an object at the top level")
    return data


def load_state(file_path: str) -> AgendaState:
    """Load saved state, or an empty default state if nothing is saved yet."""
    if not Path(file_path).exists():
        logger.debug("No agenda at {}, starting empty", file_path)
        return AgendaState()
    return state_from_dict(read_document(file_path))


def save_state(file_path: str, state: AgendaState) -> None:
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state_to_dict(state), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Saved agenda to {}", file_path)


def import_disciplines(state: AgendaState, file_path: str) -> AgendaState:
    """Replace disciplines (and settings, when present) with a document's contents.

    Existing plans are kept; callers re-plan when they want them refreshed.
    """
    data = read_document(file_path)
    if "disciplines" not in data:
        raise DocumentError(f"{Path(file_path).name} has no 'disciplines' list")
    with document_errors(Path(file_path).name):
        disciplines = disciplines_from_list(data["disciplines"])
        settings = settings_from_dict(data["settings"]) if "settings" in data else state.settings
    unit_count = sum(len(t.units) for d in disciplines for t in d.topics)
    logger.info("Imported {} discipline(s), {} unit(s) from {}", len(disciplines), unit_count, file_path)
    return replace(state, disciplines=disciplines, settings=settings)
