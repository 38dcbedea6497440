import datetime

import pytest
from django.core.cache import caches
from django_filters import CharFilter, NumberFilter

from django_datagrid.definition import GridBuilder
from myapp.models import Author, Book


@pytest.fixture(autouse=True)
def clear_caches():
    caches["default"].clear()
    caches["datagrid"].clear()
    yield
    caches["datagrid"].clear()


def filter_title(qs, value):
    if value:
        return qs.filter(title__icontains=value)
    return qs


def filter_min_pages(qs, value):
    if value is not None:
        return qs.filter(pages__gte=value)
    return qs


def book_url(links, book):
    return links.reverse("book_detail", kwargs={"pk": book.pk})


def create_books(count):
    author = Author.objects.create(name="Ann Author")
    for x in range(1, count + 1):
        Book.objects.create(
            title=f"Book {x:02d}",
            author=author,
            pages=x * 10,
            published=datetime.date(2020, 1, 1) + datetime.timedelta(days=x),
        )
    return Book.objects.all()


@pytest.fixture
def books(db):
    return create_books(45)


@pytest.fixture
def definition():
    return (
        GridBuilder("test_books")
        .query(lambda: Book.objects.all())
        .filter("title", CharFilter, {"label": "Title"}, filter_title)
        .filter("min_pages", NumberFilter, {}, filter_min_pages)
        .display("Title", "title", order_by="title")
        .display("Pages", "pages", order_by="pages")
        .display("Published", "published")
        .action("View", book_url)
        .build()
    )
