from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from jinja2 import Environment, FileSystemLoader, Template, TemplateNotFound, select_autoescape
from omegaconf import OmegaConf

from vitae.contexts.editing.document_data_structure import TemplateId

TEMPLATES_PATH = Path(__file__).parent / "templates"
CATALOG_FILENAME = "catalog.yaml"


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for HTML resume rendering.

    Templates are stored in vitae/contexts/rendering/templates/{template_id}.html.jinja
    and extend base.html.jinja. Per-template presentation settings (display name,
    accent color, font) come from templates/catalog.yaml.
    """

    def __init__(
        self,
        templates_path: Optional[Path] = None,
        filters: Optional[Dict[str, Callable[..., Any]]] = None,
    ):
        """
        Initialize the template registry.

        Args:
            templates_path: Directory holding the templates and catalog. Defaults to
                           vitae/contexts/rendering/templates/
            filters: Extra Jinja2 filters to register (name -> callable)
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = templates_path
        self._cache: Dict[str, Template] = {}
        self._catalog: Optional[Dict[str, Dict[str, Any]]] = None

        # Resume text is user input, so HTML output is always escaped
        self.env = Environment(
            loader=FileSystemLoader(str(templates_path)),
            autoescape=select_autoescape(enabled_extensions=("html.jinja",)),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        if filters:
            self.env.filters.update(filters)

    @staticmethod
    def _key(template_id: Union[TemplateId, str]) -> str:
        return template_id.value if isinstance(template_id, TemplateId) else str(template_id)

    def get_template(self, template_id: Union[TemplateId, str]) -> Template:
        """
        Get a template by id, loading and caching it if necessary.

        Args:
            template_id: Template identifier (e.g., TemplateId.MODERN or 'modern')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        key = self._key(template_id)
        if key in self._cache:
            return self._cache[key]

        template_name = f"{key}.html.jinja"

        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found for '{key}' at {self.templates_path / template_name}"
            ) from e

        self._cache[key] = template
        return template

    def get_template_path(self, template_id: Union[TemplateId, str]) -> Path:
        """Get the file path for a template."""
        return self.templates_path / f"{self._key(template_id)}.html.jinja"

    def get_catalog(self) -> Dict[str, Dict[str, Any]]:
        """
        Get presentation settings for every template, keyed by template id.

        Raises:
            FileNotFoundError: If catalog.yaml doesn't exist
        """
        if self._catalog is None:
            catalog_path = self.templates_path / CATALOG_FILENAME
            if not catalog_path.exists():
                raise FileNotFoundError(f"Template catalog not found at {catalog_path}")
            self._catalog = OmegaConf.to_container(OmegaConf.load(catalog_path), resolve=True)
        return self._catalog

    def get_style(self, template_id: Union[TemplateId, str]) -> Dict[str, Any]:
        """
        Get presentation settings for one template.

        Raises:
            KeyError: If the catalog has no entry for the template
        """
        key = self._key(template_id)
        catalog = self.get_catalog()
        if key not in catalog:
            raise KeyError(f"No catalog entry for template '{key}'")
        return catalog[key]

    def available_templates(self) -> List[Dict[str, Any]]:
        """List catalog entries (with their ids) in TemplateId order."""
        catalog = self.get_catalog()
        return [{"id": t.value, **catalog[t.value]} for t in TemplateId if t.value in catalog]

    def clear_cache(self):
        """Clear the template and catalog caches."""
        self._cache.clear()
        self._catalog = None

    def is_cached(self, template_id: Union[TemplateId, str]) -> bool:
        """Check if a template is in the cache."""
        return self._key(template_id) in self._cache
