"""Simulated cursor pagination over a flat list of items.

Each page except the last carries a continuation token equal to the last item
of that page. Using the item itself as the token lets composite cursors such
as DynamoDB's ``LastEvaluatedKey`` round-trip naturally, while S3-style
string keys work the same way.

The page served for a call is derived from the token in that call's input
rather than from a shared counter, so retrying a request with the same token
always yields the same page::

    stub.on(ListObjects).resolves_paginated(
        objects,
        page_size=50,
        token_key="NextContinuationToken",
        input_token_key="ContinuationToken",
        items_key="Contents",
    )
"""

from __future__ import annotations

import copy
import dataclasses as dc
import typing as t
from collections.abc import Mapping

from ._formatting import format_value
from ._validators import validate_page_size
from .errors import InvalidPaginationTokenError
from .matching import deep_equal

Page: t.TypeAlias = dict[str, t.Any]


@dc.dataclass(frozen=True, slots=True)
class PaginatorOptions:
    """Shape of the simulated paginated responses."""

    page_size: int = 10
    token_key: str = "NextToken"
    input_token_key: str | None = None
    items_key: str = "Items"

    def __post_init__(self) -> None:
        """Validate the page size."""
        validate_page_size(self.page_size)

    @property
    def request_token_key(self) -> str:
        """Return the input field carrying the token; defaults to ``token_key``."""
        return self.input_token_key or self.token_key


def create_paginated_responses(
    items: t.Sequence[t.Any], options: PaginatorOptions | None = None
) -> list[Page]:
    """Split *items* into pages described by *options*.

    >>> create_paginated_responses([1, 2, 3], PaginatorOptions(page_size=2))
    [{'Items': [1, 2], 'NextToken': 2}, {'Items': [3]}]
    """
    opts = PaginatorOptions() if options is None else options
    items = list(items)
    if not items:
        return [{opts.items_key: []}]

    pages: list[Page] = []
    for start in range(0, len(items), opts.page_size):
        page_items = items[start : start + opts.page_size]
        page: Page = {opts.items_key: page_items}
        if start + opts.page_size < len(items):
            page[opts.token_key] = page_items[-1]
        pages.append(page)
    return pages


class PaginatedResponder:
    """Resolve the page for each call from the token in its input."""

    def __init__(
        self, items: t.Sequence[t.Any], options: PaginatorOptions | None = None
    ) -> None:
        self.options = PaginatorOptions() if options is None else options
        self.pages = create_paginated_responses(items, self.options)

    def page_index(self, payload: object) -> int:
        """Return the index of the page answering *payload*."""
        token = None
        if isinstance(payload, Mapping):
            token = payload.get(self.options.request_token_key)
        # An empty string is how many clients spell "no token yet".
        if token is None or token == "":
            return 0
        for index, previous in enumerate(self.pages[:-1]):
            if self.options.token_key in previous and deep_equal(
                previous[self.options.token_key], token
            ):
                return index + 1
        msg = (
            f"No page follows the continuation token in "
            f"{self.options.request_token_key!r}:\n{format_value(token)}"
        )
        raise InvalidPaginationTokenError(msg)

    def __call__(self, payload: object) -> Page:
        """Return a copy of the page for *payload*."""
        return copy.deepcopy(self.pages[self.page_index(payload)])


__all__ = [
    "PaginatedResponder",
    "PaginatorOptions",
    "create_paginated_responses",
]
