"""Layouts -- the default layout, per-render layouts and layout chains.

Loads views from disk. ``home`` uses the default layout; ``about``
declares its own layout with ``{{!< page}}``, and ``page`` declares
``main`` as its parent, so about is wrapped twice. The navigation is a
partial shared by every layout.

Run:
    python app.py
"""

import asyncio
from pathlib import Path

from hbview import ViewEngine

views_dir = Path(__file__).parent / "templates"
engine = ViewEngine(views_dir)

nav_items = [
    {"url": "/", "label": "Home"},
    {"url": "/about", "label": "About"},
]


async def render_pages() -> tuple[str, str, str]:
    home = await engine.render(
        "home",
        {"site_name": "My Site", "nav_items": nav_items, "title": "Welcome"},
    )
    about = await engine.render(
        "about",
        {"site_name": "My Site", "nav_items": nav_items, "title": "About Us"},
    )
    # Explicit layout beats the one the view declares
    printable = await engine.render(
        "about",
        {"site_name": "My Site", "nav_items": nav_items, "title": "About Us", "layout": "print"},
    )
    return home, about, printable


home_output, about_output, print_output = asyncio.run(render_pages())


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)
    print()
    print("=== About (print) ===")
    print(print_output)


if __name__ == "__main__":
    main()
