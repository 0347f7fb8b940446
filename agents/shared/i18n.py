"""Translation function ``t(key, params)`` for user-facing texts.

Keys are the English source strings; placeholders use the i18next
``{{name}}`` syntax, which Jinja2 renders directly. Catalogs are flat YAML
mappings stored as ``<locale>.yaml``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import yaml
from jinja2 import Environment, StrictUndefined, Template

from backend.core.logging import get_logger

PACKAGED_LOCALES_DIR = Path(__file__).resolve().parent / "locales"

logger = get_logger(__name__)


class Translate(Protocol):
    def __call__(self, key: str, params: Mapping[str, Any] | None = None, /) -> str: ...


class Translator:
    """Callable translator bound to one locale catalog."""

    def __init__(self, catalog: Mapping[str, str] | None = None, locale: str = "en"):
        self.locale = locale
        self.catalog = dict(catalog or {})
        self._env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True)
        self._compiled: dict[str, Template] = {}

    @classmethod
    def for_locale(cls, locale: str, locales_dir: str | Path | None = None) -> Translator:
        """Load the catalog for ``locale``, falling back to its language part.

        An unknown locale yields an identity translator (keys are English).
        """
        base = Path(locales_dir) if locales_dir else PACKAGED_LOCALES_DIR
        candidates = [locale, locale.split("-")[0].split("_")[0]]
        for name in candidates:
            path = base / f"{name}.yaml"
            if not path.exists():
                continue
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"Invalid catalog format: {path}")
            logger.debug("Loaded translation catalog", extra={"locale": name, "path": str(path)})
            return cls({str(k): str(v) for k, v in data.items()}, locale=locale)
        return cls({}, locale=locale)

    def __call__(self, key: str, params: Mapping[str, Any] | None = None) -> str:
        """Translate ``key``; a placeholder without a param raises ``UndefinedError``."""
        text = self.catalog.get(key, key)
        if "{{" not in text:
            return text
        template = self._compiled.get(text)
        if template is None:
            template = self._env.from_string(text)
            self._compiled[text] = template
        return template.render(**dict(params or {}))


def identity_translator() -> Translator:
    return Translator({}, locale="en")
