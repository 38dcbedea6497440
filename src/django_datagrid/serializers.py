import datetime

from django.core.exceptions import ImproperlyConfigured
from django.urls import reverse
from django.utils import dateformat
from django.utils.http import urlencode
from django_tables2.utils import Accessor

from .definition import DisplayField, GridDefinition
from .pagination import page_count


class LinkContext:
    """Passed to action url builders so they can resolve urls for the current request"""

    def __init__(self, request=None):
        self.request = request

    def reverse(self, viewname, args=None, kwargs=None, query=None):
        url = reverse(viewname, args=args, kwargs=kwargs)
        if query:
            url = f"{url}?{urlencode(query)}"
        return url

    def build_absolute_uri(self, location=None):
        if self.request is None:
            return location
        return self.request.build_absolute_uri(location)


def format_value(value, date_format):
    if value is None:
        return ""
    if isinstance(value, (datetime.date, datetime.datetime)):
        return dateformat.format(value, date_format)
    if isinstance(value, datetime.time):
        return dateformat.time_format(value, date_format)
    return str(value)


def display_value(column: DisplayField, row, date_format):
    """
    Value of one cell. Callable accessors are returned as is. Named accessors are
    resolved on the row (attributes, keys and zero-argument methods, "author__name"
    paths allowed), falling back to a get_<name>() method, and formatted.
    """
    if column.is_callable:
        return column.accessor(row)
    try:
        value = Accessor(column.accessor).resolve(row, quiet=False)
    except ValueError as e:
        getter = getattr(row, f"get_{column.accessor}", None)
        if not callable(getter):
            raise ImproperlyConfigured(
                f"No getter found for field '{column.accessor}' in "
                f"{row.__class__.__name__} (column '{column.title}'): {e}"
            ) from e
        value = getter()
    return format_value(value, date_format)


def serialize_row(row, definition: GridDefinition, link_context: LinkContext):
    return {
        "data": [
            display_value(column, row, definition.date_format)
            for column in definition.columns.values()
        ],
        "actions": [
            {"url": link.url_builder(link_context, row), "label": link.label}
            for link in definition.actions
        ],
    }


def serialize(page, definition: GridDefinition, link_context: LinkContext = None):
    """
    Wire format of one page::

        {"items": [{"data": [...], "actions": [{"url": ..., "label": ...}]}],
         "nbPages": 3, "currentPage": 2}
    """
    link_context = link_context or LinkContext()
    return {
        "items": [serialize_row(row, definition, link_context) for row in page.rows],
        "nbPages": page_count(page.total_count, page.page_size),
        "currentPage": page.current_page,
    }
