from django_filters import BooleanFilter, CharFilter, NumberFilter

from django_datagrid.grids import DataGrid
from django_datagrid.registry import register
from .models import Book


def filter_title(qs, value):
    if value:
        return qs.filter(title__icontains=value)
    return qs


def filter_min_pages(qs, value):
    if value is not None:
        return qs.filter(pages__gte=value)
    return qs


def filter_available(qs, value):
    if value is None:
        return qs
    return qs.filter(available=value)


def book_url(links, book):
    return links.reverse("book_detail", kwargs={"pk": book.pk})


@register
class BookGrid(DataGrid):
    model = Book

    def configure(self, grid):
        grid.filter("title", CharFilter, {"label": "Title"}, filter_title)
        grid.filter(
            "min_pages",
            NumberFilter,
            {"label": "Minimum pages", "min_value": 0},
            filter_min_pages,
        )
        grid.filter("available", BooleanFilter, {}, filter_available)
        grid.display("Title", "title", order_by="title")
        grid.display("Author", "author__name", order_by="author__name")
        grid.display("Pages", "pages", order_by="pages")
        grid.display("Published", "published", order_by="published")
        grid.display("Summary", lambda book: book.get_summary())
        grid.action("View", book_url)


@register
class PostBookGrid(DataGrid):
    model = Book
    method = "POST"
    page_size = 5
    date_format = "Y-m-d"

    def get_queryset(self):
        return Book.objects.filter(available=True)

    def configure(self, grid):
        grid.filter("title", CharFilter, {"label": "Title"}, filter_title)
        grid.display("Title", "title", order_by="title")
        grid.display("Published", "published")
