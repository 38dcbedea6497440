from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from django.core.exceptions import ImproperlyConfigured
from django.forms.utils import pretty_name
from django_filters.filters import Filter

from .utils import DEFAULT_DATE_FORMAT, RESERVED_NAMES

DEFAULT_METHOD = "GET"
DEFAULT_PAGE_SIZE = 20
METHODS = ("GET", "POST")

# (plan, value) -> plan
Predicate = Callable[[Any, Any], Any]
# (link_context, row) -> url
UrlBuilder = Callable[[Any, Any], str]
Accessor = Union[str, Callable[[Any], Any]]


def empty_mapping():
    return MappingProxyType({})


@dataclass(frozen=True)
class FilterField:
    name: str
    filter_class: type
    options: Mapping[str, Any]
    predicate: Predicate

    def make_filter(self):
        options = dict(self.options)
        options.setdefault("required", False)
        options.setdefault("label", pretty_name(self.name))
        return self.filter_class(field_name=self.name, **options)


@dataclass(frozen=True)
class DisplayField:
    title: str
    accessor: Accessor
    order_by: Optional[str] = None

    @property
    def is_callable(self):
        return callable(self.accessor)


@dataclass(frozen=True)
class ActionLink:
    label: str
    url_builder: UrlBuilder


@dataclass(frozen=True, eq=False)
class GridDefinition:
    """
    Static configuration of one kind of grid. Built once with a GridBuilder and shared
    by every request for that grid.
    """

    grid_id: str
    queryset_factory: Callable[[], Any]
    filters: Mapping[str, FilterField] = field(default_factory=empty_mapping)
    columns: Mapping[str, DisplayField] = field(default_factory=empty_mapping)
    actions: tuple = ()
    method: str = DEFAULT_METHOD
    page_size: int = DEFAULT_PAGE_SIZE
    date_format: str = DEFAULT_DATE_FORMAT

    @property
    def has_actions(self):
        return len(self.actions) > 0

    @property
    def titles(self):
        return list(self.columns.keys())

    @property
    def orderable_fields(self):
        return {col.order_by for col in self.columns.values() if col.order_by}

    @property
    def form_id(self):
        return f"{self.grid_id}-datagrid-filter-form"

    def get_queryset(self):
        return self.queryset_factory()


class GridBuilder:
    """
    Fluent builder for a GridDefinition::

        definition = (
            GridBuilder("books")
            .query(Book.objects.all)
            .filter("title", CharFilter, {"label": "Title"}, filter_title)
            .display("Title", "title", order_by="title")
            .action("Edit", lambda links, book: links.reverse("edit", args=[book.pk]))
            .build()
        )
    """

    def __init__(self, grid_id, date_format=DEFAULT_DATE_FORMAT):
        self.grid_id = grid_id
        self._filters = {}
        self._columns = {}
        self._actions = []
        self._method = DEFAULT_METHOD
        self._page_size = DEFAULT_PAGE_SIZE
        self._date_format = date_format
        self._queryset_factory = None

    def error(self, message):
        return ImproperlyConfigured(f"Grid '{self.grid_id}': {message}")

    def query(self, queryset_factory):
        """
        Set the base query. Accepts a callable returning a queryset, or a queryset
        which is copied with .all() on every request.
        """
        if callable(queryset_factory):
            self._queryset_factory = queryset_factory
        elif hasattr(queryset_factory, "all"):
            self._queryset_factory = queryset_factory.all
        else:
            raise self.error("query() needs a queryset or a callable returning one")
        return self

    def filter(self, name, filter_class, options=None, predicate=None):
        """
        Add a filter field. filter_class is a django-filter Filter subclass that
        decides the form field, options are its keyword arguments and
        predicate(plan, value) returns the narrowed plan.
        """
        if name in RESERVED_NAMES:
            raise self.error(f"'{name}' is a reserved filter name")
        if name in self._filters:
            raise self.error(f"duplicate filter '{name}'")
        if not (isinstance(filter_class, type) and issubclass(filter_class, Filter)):
            raise self.error(f"filter '{name}' must use a django_filters Filter class")
        if not callable(predicate):
            raise self.error(f"filter '{name}' needs a callable predicate")
        self._filters[name] = FilterField(
            name, filter_class, MappingProxyType(dict(options or {})), predicate
        )
        return self

    def display(self, title, accessor, order_by=None):
        if not (isinstance(accessor, str) or callable(accessor)):
            raise self.error(
                f"column '{title}' accessor must be a field name or a callable"
            )
        self._columns[title] = DisplayField(title, accessor, order_by)
        return self

    def display_fields(self, fields):
        """Replace all columns with a {title: accessor} mapping"""
        self._columns = {}
        for title, accessor in fields.items():
            self.display(title, accessor)
        return self

    def remove_display(self, title):
        self._columns.pop(title, None)
        return self

    def action(self, label, url_builder):
        if not callable(url_builder):
            raise self.error(f"action '{label}' needs a callable url builder")
        self._actions.append(ActionLink(label, url_builder))
        return self

    def method(self, method):
        method = method.upper()
        if method not in METHODS:
            raise self.error(f"method must be GET or POST, not '{method}'")
        self._method = method
        return self

    def page_size(self, page_size):
        if not isinstance(page_size, int) or page_size < 1:
            raise self.error("page size must be an integer >= 1")
        self._page_size = page_size
        return self

    def date_format(self, date_format):
        self._date_format = date_format
        return self

    def build(self) -> GridDefinition:
        if self._queryset_factory is None:
            raise self.error("no query. Call query() in configure().")
        return GridDefinition(
            grid_id=self.grid_id,
            queryset_factory=self._queryset_factory,
            filters=MappingProxyType(dict(self._filters)),
            columns=MappingProxyType(dict(self._columns)),
            actions=tuple(self._actions),
            method=self._method,
            page_size=self._page_size,
            date_format=self._date_format,
        )
