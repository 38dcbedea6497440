from django import template
from django.templatetags.static import static
from django.utils.html import format_html

from ..pagination import PageItem
from ..utils import get_htmx_url

register = template.Library()


@register.simple_tag(takes_context=False)
def datagrid_script():
    return format_html(
        '<script src="{}" defer></script>', static("django_datagrid/js/datagrid.js")
    )


@register.simple_tag(takes_context=False)
def datagrid_htmx_script():
    """The htmx library, needed by grids rendered with htmx=True"""
    return format_html('<script src="{}" defer></script>', get_htmx_url())


@register.simple_tag(takes_context=False)
def datagrid_css():
    return format_html(
        '<link rel="stylesheet" href="{}">', static("django_datagrid/css/datagrid.css")
    )


@register.simple_tag(takes_context=True)
def datagrid(context, grid, template_name=None):
    """Render a BoundGrid: filter form, table and pagination"""
    return grid.render(template_name)


@register.filter
def page_item_class(item: PageItem):
    css = "page-item"
    if item.active:
        css += " active"
    if item.disabled:
        css += " disabled"
    return css
