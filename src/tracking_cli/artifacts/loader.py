"""Load and dump the YAML artifacts under .telemetry/."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from tracking_cli.errors import ArtifactNotFoundError, ArtifactParseError

from .models import CurrentState, TrackingPlan

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location or '<root>'}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def read_yaml(path: Path) -> object:
    """Read a YAML file into plain Python objects."""
    if not path.exists():
        raise ArtifactNotFoundError(path)

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.load(handle)
    except YAMLError as exc:
        raise ArtifactParseError(path, f"invalid YAML: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ArtifactParseError(path, f"not UTF-8 text: {exc.reason} at byte {exc.start}") from exc
    except OSError as exc:
        raise ArtifactParseError(path, f"could not be read: {exc}") from exc


def load_model(path: Path, model: Type[ModelT]) -> ModelT:
    """Load ``path`` and validate it against ``model``.

    An empty file yields an empty model.
    """
    data = read_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ArtifactParseError(path, "top level must be a mapping")

    try:
        parsed = model.model_validate(data)
    except ValidationError as exc:
        raise ArtifactParseError(path, _format_validation_error(exc)) from exc

    logger.debug("Loaded %s from %s", model.__name__, path)
    return parsed


def load_current_state(path: Path) -> CurrentState:
    return load_model(path, CurrentState)


def load_tracking_plan(path: Path) -> TrackingPlan:
    return load_model(path, TrackingPlan)


def dump_artifact(artifact: BaseModel, path: Path) -> Path:
    """Write ``artifact`` as YAML, omitting unset optional fields."""
    payload = artifact.model_dump(mode="json", exclude_none=True)
    path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(payload, handle)
    return path


def require_unique_event_names(artifact: Union[CurrentState, TrackingPlan], path: Path) -> None:
    """Raise ArtifactParseError when ``artifact`` lists an event name twice.

    The delta is keyed on event name, so duplicates have no single meaning.
    """
    counts = Counter(event.name for event in artifact.events)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise ArtifactParseError(
            path,
            f"duplicate event name(s) {', '.join(duplicates)}; run 'tracking-skills validate' and merge them",
        )
