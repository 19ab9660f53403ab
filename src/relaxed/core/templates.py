"""Jinja2 wrapper turning converter payloads into complete HTML documents."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
    select_autoescape,
)

from .config import TEMPLATE_DIR
from .exceptions import TemplateError


TEMPLATE_EXTENSION = ".html"


def _build_environment(search_path: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(search_path)),
        autoescape=select_autoescape(["html", "htm"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class TemplateRenderer:
    """Render built-in templates by name and master documents by path."""

    def __init__(self, template_dir: Path | str = TEMPLATE_DIR) -> None:
        self.template_dir = Path(template_dir).resolve()
        if not self.template_dir.is_dir():
            raise TemplateError(f"Template directory does not exist: {self.template_dir}")
        self.environment = _build_environment(self.template_dir)

    def render(self, template_name: str, data: Mapping[str, Any] | None = None) -> str:
        """Render ``<template_name>.html`` with the given data record."""
        filename = template_name
        if not filename.endswith(TEMPLATE_EXTENSION):
            filename += TEMPLATE_EXTENSION
        try:
            template = self.environment.get_template(filename)
        except TemplateNotFound as exc:
            raise TemplateError(
                f"Template '{template_name}' is missing in {self.template_dir}"
            ) from exc
        except TemplateSyntaxError as exc:
            raise TemplateError(f"Template '{template_name}' is invalid: {exc}") from exc
        return _render(template, dict(data or {}), template_name)

    def render_file(self, path: Path | str, data: Mapping[str, Any] | None = None) -> str:
        """Render a template file as an entry point.

        The loader is rooted at the file's directory so the document can
        include neighbouring fragments by relative name.
        """
        path = Path(path).resolve()
        environment = _build_environment(path.parent)
        try:
            template = environment.get_template(path.name)
        except TemplateNotFound as exc:
            raise TemplateError(f"Template file '{path}' does not exist") from exc
        except TemplateSyntaxError as exc:
            location = f"{exc.filename or path}:{exc.lineno}"
            raise TemplateError(f"{location}: {exc.message}") from exc
        return _render(template, dict(data or {}), str(path))


def _render(template: Any, context: dict[str, Any], label: str) -> str:
    try:
        return template.render(context)
    except UndefinedError as exc:
        raise TemplateError(f"Template '{label}' is missing data: {exc.message}") from exc
    except TemplateNotFound as exc:
        raise TemplateError(f"Template '{label}' includes a missing file: {exc.name}") from exc
    except TemplateSyntaxError as exc:
        location = f"{exc.filename or label}:{exc.lineno}"
        raise TemplateError(f"{location}: {exc.message}") from exc
    except JinjaTemplateError as exc:
        raise TemplateError(f"Template '{label}' failed to render: {exc}") from exc
    except Exception as exc:
        raise TemplateError(
            f"Template '{label}' raised {type(exc).__name__} while rendering: {exc}"
        ) from exc


__all__ = ["TEMPLATE_EXTENSION", "TemplateRenderer"]
