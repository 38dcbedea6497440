from django.urls import include, path

from myapp.views import BookHtmxListView, BookListView, PostBookListView, book_detail

urlpatterns = [
    path("datagrid/", include("django_datagrid.urls")),
    path("books/", BookListView.as_view(), name="books"),
    path("books/htmx/", BookHtmxListView.as_view(), name="books_htmx"),
    path("books/available/", PostBookListView.as_view(), name="books_available"),
    path("books/<int:pk>/", book_detail, name="book_detail"),
]
