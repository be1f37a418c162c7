"""Builds reasoning-service prompts from task descriptions and summaries."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .constants import TEMPLATE_NAMES, ResponseVariant


@dataclass(frozen=True)
class ContextRequest:
    """A task description, the rendered summary and the composed prompt."""

    task_description: str
    rendered_summary: str
    variant: ResponseVariant
    prompt: str
    feature: Optional[str] = None


class PromptBuilder:
    """Composes prompts through Jinja templates.

    Rendering is pure: identical inputs always yield the identical prompt,
    and nothing is written to disk here.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = self._create_env(self.templates_dir)

    def build_request(
        self,
        task_description: str,
        summary: str,
        *,
        variant: ResponseVariant = ResponseVariant.FILE_SELECTION,
        feature: str | None = None,
    ) -> ContextRequest:
        template = self._env.get_template(TEMPLATE_NAMES[variant])
        prompt = template.render(
            task_description=task_description.strip(),
            rendered_summary=summary.rstrip("\n"),
            feature=feature,
        )
        return ContextRequest(
            task_description=task_description,
            rendered_summary=summary,
            variant=variant,
            prompt=prompt.strip() + "\n",
            feature=feature,
        )

    def build_feature_request(self, feature: str, description: str, summary: str) -> ContextRequest:
        """Prompt asking which files are needed to build the named feature."""
        return self.build_request(
            description,
            summary,
            variant=ResponseVariant.FILE_SELECTION,
            feature=feature,
        )

    def build_implement_request(self, summary: str, task_description: str = "") -> ContextRequest:
        return self.build_request(
            task_description,
            summary,
            variant=ResponseVariant.CODE_BUNDLE,
        )

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )


__all__ = ["ContextRequest", "PromptBuilder"]
