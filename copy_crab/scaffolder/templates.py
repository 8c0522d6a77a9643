"""Template payload loading for the crabSafe feature modules.

Provides the TemplateLoader class which locates the TypeScript payloads under
the ``copy_crab/scaffolder/templates/`` directory through a Jinja2
``FileSystemLoader``. Payloads are copied into user projects verbatim, so
sources are read with ``get_source`` and never rendered.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateLoader
# ---------------------------------------------------------------------------


class TemplateLoader:
    """Reads raw template sources from a template directory.

    Sources are cached after the first read; the payloads are static package
    data and never change during a run.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            keep_trailing_newline=True,
        )
        self._cache: dict[str, str] = {}

    def source(self, template_name: str) -> str:
        """Return the unrendered text of *template_name*.

        Raises:
            jinja2.TemplateNotFound: If no such file exists in the directory.
        """
        if template_name not in self._cache:
            text, _filename, _uptodate = self.env.loader.get_source(self.env, template_name)
            self._cache[template_name] = text
        return self._cache[template_name]
