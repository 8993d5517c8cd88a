"""JSON-file persistence for pydantic models.

Small helpers used for the local config file: read a file into a model,
write a model back as indented JSON. Every failure (missing file,
permission error, invalid JSON, schema mismatch) surfaces as
:class:`ConfigError` so the entry point can treat it as a setup failure.

Examples:
    Round-trip a model::

        >>> class Prefs(BaseModel):
        ...     theme: str = "dark"
        >>> save_model(Prefs(theme="light"), Path("/tmp/prefs.json"))
        PosixPath('/tmp/prefs.json')
        >>> load_model(Path("/tmp/prefs.json"), Prefs).theme
        'light'
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

from shellchat.lib.errors import ConfigError

logger = logging.getLogger(__name__)


def load_model[M: BaseModel](path: Path, model_type: type[M]) -> M:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e.strerror or e}") from e
    try:
        return model_type.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid config in {path}: {e.error_count()} error(s)") from e


def save_model(model: BaseModel, path: Path) -> Path:
    """Write *model* to *path* as two-space indented JSON."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(model.model_dump_json(indent=2), encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot write {path}: {e.strerror or e}") from e
    logger.debug("Saved %s to %s", type(model).__name__, path)
    return path
