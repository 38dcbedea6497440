from django.db import models


class Author(models.Model):
    name = models.CharField(max_length=100)

    def __str__(self):
        return self.name


class Book(models.Model):
    title = models.CharField(max_length=100)
    author = models.ForeignKey(Author, null=True, blank=True, on_delete=models.SET_NULL)
    pages = models.IntegerField(default=0)
    published = models.DateField(null=True, blank=True)
    available = models.BooleanField(default=True)

    def __str__(self):
        return self.title

    def get_summary(self):
        return f"{self.title} ({self.pages} pages)"
