"""Read-only catalog of built-in templates."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path

from boardkit.templates.exceptions import InvalidTemplateError, TemplateNotFoundError
from boardkit.templates.models import Template
from boardkit.templates.schema import parse_template

logger = logging.getLogger("boardkit.templates")


class TemplateCatalog:
    """Looks up templates by id and category.

    Templates are loaded once from the JSON files bundled with the package,
    plus any ``*.json`` files in ``extra_dir``. When two files share an id the
    first one loaded wins.
    """

    def __init__(self, templates: list[Template] | None = None) -> None:
        self._templates: dict[str, Template] = {}
        for template in templates or []:
            self._add(template, source="<memory>")

    @classmethod
    def load(cls, extra_dir: str | Path | None = None) -> TemplateCatalog:
        """Build a catalog from bundled templates and an optional directory.

        Args:
            extra_dir: Directory with additional template JSON files.

        Returns:
            The populated catalog.

        Raises:
            InvalidTemplateError: If any template file is malformed.
        """
        catalog = cls()
        bundled = resources.files("boardkit.templates") / "data"
        for entry in sorted(bundled.iterdir(), key=lambda e: e.name):
            if entry.name.endswith(".json"):
                catalog._add(_parse_file(entry.name, entry.read_text(encoding="utf-8")), entry.name)

        if extra_dir is not None:
            for path in sorted(Path(extra_dir).glob("*.json")):
                catalog._add(_parse_file(str(path), path.read_text(encoding="utf-8")), str(path))

        logger.info("Loaded %d template(s)", len(catalog._templates))
        return catalog

    def _add(self, template: Template, source: str) -> None:
        if template.id in self._templates:
            logger.warning("Ignoring duplicate template id %r from %s", template.id, source)
            return
        self._templates[template.id] = template

    def get(self, template_id: str) -> Template:
        """Get a template by id.

        Raises:
            TemplateNotFoundError: If no template has this id.
        """
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template '{template_id}' not found")
        return template

    def list_templates(self, category: str | None = None) -> list[Template]:
        """List templates, optionally only those in ``category``."""
        templates = list(self._templates.values())
        if category is not None:
            templates = [t for t in templates if t.category == category]
        return templates

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(t.category for t in self._templates.values()))


def _parse_file(source: str, text: str) -> Template:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidTemplateError(f"{source}: not valid JSON: {e}") from e
    try:
        return parse_template(data)
    except InvalidTemplateError as e:
        raise InvalidTemplateError(f"{source}: {e}") from e
