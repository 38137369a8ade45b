"""
Report Template Registry

Maps report keys ('document.v1', 'invoice.v1') to template factories. The
delivery router resolves a key per request and gets a fresh template.
"""

from typing import Any, Callable, Protocol

from .layout import DocumentLayout


class ReportTemplate(Protocol):
    """What the delivery router needs from a document shape"""

    kind: str

    def parse_request(self, payload: Any) -> Any:
        """Coerce a JSON body or form post into the template's request type"""
        ...

    def build_layout(self, request: Any) -> DocumentLayout:
        ...

    def get_filename(self, request: Any, *, preview: bool = False) -> str:
        ...

    def get_source_data(self, request: Any) -> Any:
        """Structured input stored next to the artifact, or None"""
        ...

    def get_reference(self, request: Any) -> str:
        """Business reference (invoice number) stored with the artifact"""
        ...


TemplateFactory = Callable[[], ReportTemplate]


class TemplateNotFound(KeyError):
    """No template is registered under the requested key"""


class DuplicateTemplate(ValueError):
    """A template is already registered under the key"""


class ReportRegistry:
    """Report key -> template factory"""

    def __init__(self):
        self._factories: dict[str, TemplateFactory] = {}

    def register(self, report_key: str, factory: TemplateFactory) -> None:
        """
        Add a template.

        Args:
            report_key: Versioned key such as 'invoice.v1'
            factory: Callable returning a new template (usually the class)

        Raises:
            DuplicateTemplate: If the key is taken
        """
        if report_key in self._factories:
            raise DuplicateTemplate(f"Report template '{report_key}' is already registered")
        self._factories[report_key] = factory

    def get_template(self, report_key: str) -> ReportTemplate:
        try:
            factory = self._factories[report_key]
        except KeyError:
            available = ', '.join(self.list_templates()) or 'none'
            raise TemplateNotFound(f"Report template '{report_key}' not found (registered: {available})") from None
        return factory()

    def list_templates(self) -> list[str]:
        return sorted(self._factories)


_registry = ReportRegistry()


def register_template(report_key: str, factory: TemplateFactory) -> None:
    _registry.register(report_key, factory)


def get_template(report_key: str) -> ReportTemplate:
    return _registry.get_template(report_key)

