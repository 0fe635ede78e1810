"""
Shared pytest fixtures: HTML pages with repeated content and a loader that
turns them into Documents without touching the network.
"""

import logging

import pytest

from schemasniff.provider import DocumentProvider

BOOK_TITLES = ["Sharp Objects", "Soumission", "Tipping the Velvet", "The Requiem Red", "Olio"]
BOOK_PRICES = ["£47.82", "£50.10", "£53.74", "£22.65", "£23.88"]

CARD_TITLES = ["Robust widgets", "Tidy gadgets", "Quiet gizmos", "Bright lamps", "Solid desks"]


def _cards(count: int) -> str:
    return "\n".join(
        f'<div class="card"><h2 class="card-title">{CARD_TITLES[i % len(CARD_TITLES)]}</h2>'
        f'<p class="card-body">Card body number {i}</p></div>'
        for i in range(count)
    )


@pytest.fixture
def provider():
    return DocumentProvider()


@pytest.fixture
def load(provider):
    """Parse an HTML string into a Document."""
    def _load(html: str, url: str = "https://example.com/list"):
        return provider.from_html(html, url=url)
    return _load


@pytest.fixture
def books_html() -> str:
    """Five product tiles, each with image, linked title, price and a constant label."""
    items = "\n".join(
        f"""
        <li class="col-xs-6">
          <article class="product_pod">
            <img src="/media/cover-{i}.jpg" alt="{title}">
            <h3><a href="/catalogue/book-{i}.html">{title}</a></h3>
            <p class="price_color">{price}</p>
            <p class="instock availability">In stock</p>
          </article>
        </li>"""
        for i, (title, price) in enumerate(zip(BOOK_TITLES, BOOK_PRICES), start=1)
    )
    return f"""<!DOCTYPE html>
<html><head><title>Books</title><script>var x = 1;</script></head>
<body>
  <!-- product listing -->
  <ol class="row">{items}
  </ol>
</body></html>"""


@pytest.fixture
def list_items_html() -> str:
    """Five <li class="item extra"> each holding one distinct link."""
    names = ["Alpha widget", "Bravo gadget", "Charlie gizmo", "Delta doohickey", "Echo contraption"]
    items = "\n".join(
        f'<li class="item extra"><a href="/items/{i}">{name}</a></li>'
        for i, name in enumerate(names, start=1)
    )
    return f"<html><body><ul class=\"results\">{items}</ul></body></html>"


@pytest.fixture
def nav_and_cards_html():
    """Builder: `links` identical nav anchors plus `cards` diverse cards."""
    def _build(links: int = 4, cards: int = 4) -> str:
        nav = "\n".join('<a class="nav-link" href="/">Home</a>' for _ in range(links))
        return f"<html><body><nav>{nav}</nav><main>{_cards(cards)}</main></body></html>"
    return _build


@pytest.fixture
def table_html() -> str:
    rows = "\n".join(
        f'<tr class="row"><td class="name">Order {name}</td>'
        f'<td class="amount">${amount}</td><td class="placed">2024-01-{day:02d}</td></tr>'
        for name, amount, day in [
            ("Ivory", "12.50", 3), ("Jade", "7.25", 9), ("Kestrel", "101.00", 14), ("Lumen", "3.99", 27),
        ]
    )
    return f'<html><body><table class="orders">{rows}</table></body></html>'


@pytest.fixture(autouse=True)
def reset_package_logger():
    """setup_logger() attaches handlers to captured streams; drop them after each test."""
    yield
    logger = logging.getLogger("schemasniff")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
