"""
Jinja2 rendering for generated artifacts.

Templates are looked up in an ordered list of directories, so a user
directory placed first can replace any packaged template by name.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import jinja2
from jinja2 import ChoiceLoader, DictLoader, Environment, FileSystemLoader, StrictUndefined

from ...logging_config import get_logger
from .naming import to_pascal_case

logger = get_logger(__name__)


class TemplateError(Exception):
    """Raised when a template is missing or fails to render."""

    pass


def php_string(value: Any) -> str:
    """Single-quoted PHP string literal."""
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class TemplateEngine:
    """Jinja2 environment tuned for source code output."""

    def __init__(self, search_path: Iterable[Union[str, Path]] = ()):
        """
        Args:
            search_path: Template directories, highest priority first.
                Directories that do not exist are ignored.
        """
        self.search_path: List[Path] = [Path(p) for p in search_path if Path(p).is_dir()]
        self._inline = DictLoader({})
        self._env = Environment(
            loader=ChoiceLoader(
                [self._inline, FileSystemLoader([str(p) for p in self.search_path])]
            ),
            # Generated code, never HTML
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters.update(
            pascal_case=to_pascal_case,
            quote=php_string,
        )

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except jinja2.TemplateNotFound as e:
            raise TemplateError(
                f"Template {template_name} not found in {self._describe_path()}"
            ) from e
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, source: str, context: Dict[str, Any]) -> str:
        try:
            return self._env.from_string(source).render(**context)
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed to render template string: {e}") from e

    def add_template(self, name: str, content: str):
        """Register an in-memory template; it shadows files of the same name."""
        self._inline.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        return template_name in self._env.list_templates()

    def _describe_path(self) -> str:
        if not self.search_path:
            return "memory"
        return ", ".join(str(p) for p in self.search_path)


def create_template_engine(
    template_dir: Optional[Path] = None, override_dir: Optional[Union[str, Path]] = None
) -> TemplateEngine:
    """Engine reading ``override_dir`` first, then the packaged ``template_dir``."""
    search_path = []
    if override_dir:
        if not Path(override_dir).is_dir():
            logger.warning("Template override directory %s does not exist", override_dir)
        search_path.append(override_dir)
    if template_dir:
        search_path.append(template_dir)
    return TemplateEngine(search_path)
