import math
from dataclasses import dataclass
from typing import Optional

from django.utils.translation import gettext_lazy as _

PREVIOUS = "previous"
NEXT = "next"
PAGE = "page"


def page_count(total_count: int, page_size: int) -> int:
    """Number of pages for total_count rows. An empty result still has one page."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    return max(math.ceil(total_count / page_size), 1)


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


@dataclass(frozen=True)
class PageItem:
    kind: str
    label: str
    page: Optional[int]
    active: bool = False
    disabled: bool = False


def build_pagination(current_page: int, nb_pages: int) -> list[PageItem]:
    """
    Items of the pagination control: previous, one item per page, next.
    The item for current_page is active; previous is disabled on the first page and
    next on the last one. The browser controller builds the same list from the JSON
    response.
    """
    nb_pages = max(nb_pages, 1)
    items = [
        PageItem(
            PREVIOUS,
            str(_("Previous")),
            current_page - 1 if current_page > 1 else None,
            disabled=current_page <= 1,
        )
    ]
    for number in range(1, nb_pages + 1):
        items.append(PageItem(PAGE, str(number), number, active=number == current_page))
    items.append(
        PageItem(
            NEXT,
            str(_("Next")),
            current_page + 1 if current_page < nb_pages else None,
            disabled=current_page >= nb_pages,
        )
    )
    return items
