from django.http import HttpResponse
from django.shortcuts import get_object_or_404

from django_datagrid.views import DataGridView
from .datagrids import BookGrid, PostBookGrid
from .models import Book


class BookListView(DataGridView):
    title = "Books"
    grid_class = BookGrid


class BookHtmxListView(DataGridView):
    title = "Books (htmx)"
    grid_class = BookGrid
    htmx = True


class PostBookListView(DataGridView):
    title = "Available books"
    grid_class = PostBookGrid


def book_detail(request, pk):
    book = get_object_or_404(Book, pk=pk)
    return HttpResponse(book.title)
