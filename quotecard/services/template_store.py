"""Template Store - named editor snapshots persisted as a JSON array."""

import json
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from quotecard.config import settings
from quotecard.exceptions import TemplateExistsError, TemplateNotFoundError
from quotecard.models.template import Template, TemplateSettings


class TemplateStore:
    """Manages saved templates with JSON file persistence.

    Templates keep insertion order; overwriting a template replaces it in
    place.
    """

    def __init__(self, templates_file: Optional[Path] = None):
        self._file = templates_file or settings.templates_file
        self._templates: List[Template] = []
        self._load()

    def _load(self) -> None:
        """Load templates from disk; failures leave an empty store."""
        self._templates = []
        if not self._file.exists():
            return
        try:
            raw = json.loads(self._file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load templates from {self._file}: {e}")
            return

        if not isinstance(raw, list):
            logger.error(f"Ignoring templates in {self._file}: expected a JSON array")
            return

        for item in raw:
            try:
                self._templates.append(Template(**item))
            except (TypeError, ValidationError) as e:
                logger.warning(f"Skipping invalid template entry: {e}")
        logger.info(f"Loaded {len(self._templates)} templates")

    def _save(self) -> None:
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            self._file.write_text(
                json.dumps(
                    [t.model_dump(mode="json") for t in self._templates],
                    ensure_ascii=False,
                    indent=2,
                ),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(f"Failed to save templates: {e}")

    def _index(self, name: str) -> int:
        for i, template in enumerate(self._templates):
            if template.name == name:
                return i
        return -1

    def list(self) -> List[Template]:
        """All templates in insertion order."""
        return list(self._templates)

    def get(self, name: str) -> Template:
        index = self._index(name)
        if index < 0:
            raise TemplateNotFoundError(name)
        return self._templates[index]

    def exists(self, name: str) -> bool:
        return self._index(name) >= 0

    def save(self, name: str, template_settings: TemplateSettings, overwrite: bool = False) -> Template:
        """Save a template.

        Args:
            name: Template name; blank names become "Template {n+1}"
            template_settings: Snapshot to store
            overwrite: Replace an existing template of the same name

        Raises:
            TemplateExistsError: If the name is taken and overwrite is False
        """
        name = (name or "").strip() or f"Template {len(self._templates) + 1}"
        template = Template(name=name, settings=template_settings)

        index = self._index(name)
        if index >= 0:
            if not overwrite:
                raise TemplateExistsError(name)
            self._templates[index] = template
            logger.info(f"Overwrote template: {name}")
        else:
            self._templates.append(template)
            logger.info(f"Saved template: {name}")

        self._save()
        return template

    def delete(self, name: str) -> None:
        index = self._index(name)
        if index < 0:
            raise TemplateNotFoundError(name)
        del self._templates[index]
        self._save()
        logger.info(f"Deleted template: {name}")

    def __len__(self) -> int:
        return len(self._templates)
