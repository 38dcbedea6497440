"""
Django data grids refreshed over ajax
=====================================
A data grid is declared once, in a class that lists its filters, its columns and the
action links shown on every row. The grid renders a filter form with a first page of
results, and from then on the browser refreshes the table body and the pagination
through a small JSON endpoint without reloading the page.

Key features
============
* Filters are `django_filter <https://github.com/carltongibson/django-filter>`_
  fields, each with a predicate that narrows the queryset
* Columns read values with
  `django_tables2 <https://github.com/jieter/django-tables2>`_ accessors or callables
* Per-row action links built from the url resolver
* Multi-column ordering and numbered pagination
* Result pages cached on disk for an hour, keyed by the full request
"""

__version__ = "0.1"
