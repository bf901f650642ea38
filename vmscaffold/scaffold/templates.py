"""Template engine for project scaffolding."""

from pathlib import Path
from typing import Any, Dict

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError

from vmscaffold.core.errors import ScaffoldStepError, TemplateMissingError, TemplateRenderError


class TemplateEngine:
    """Renders template-* files from the templates directory."""

    def __init__(self, template_dir: Path):
        self.template_dir = Path(template_dir)
        self.jinja_env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def template_path(self, template_name: str) -> Path:
        return self.template_dir / f"template-{template_name}"

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with given context.

        Args:
            template_name: Name without the "template-" prefix (e.g. "Vagrantfile")
            context: Values substituted into the template

        Raises:
            TemplateMissingError: If the template file doesn't exist
            TemplateRenderError: If the template can't be read or rendered
        """
        template_path = self.template_path(template_name)
        if not template_path.is_file():
            raise TemplateMissingError(
                f"Template '{template_name}' not found at {template_path}",
                step="render template",
                path=template_path,
            )

        try:
            template = self.jinja_env.from_string(template_path.read_text())
            return template.render(**context)
        except (OSError, TemplateError) as e:
            raise TemplateRenderError(
                f"Failed to render template {template_path}: {e}",
                step="render template",
                path=template_path,
            )

    def render_to(
        self,
        template_name: str,
        target: Path,
        context: Dict[str, Any],
        executable: bool = False,
    ) -> Path:
        """Render a template and write it to target."""
        content = self.render_template(template_name, context)
        try:
            target.write_text(content)
            if executable:
                target.chmod(0o755)
        except OSError as e:
            raise ScaffoldStepError(
                f"Failed to write {target}: {e}", step="write file", path=target
            )
        return target
