"""Placeholder blocks -- views and partials filling regions of a layout.

The layout reserves two regions with ``{{{block "..."}}}``. The view adds
a stylesheet to one, and the ``chart`` partial it includes adds a script
to the other. The sidebar block has default content the view never
overrides.

Run:
    python app.py
"""

import asyncio
from pathlib import Path

from hbview import ViewEngine

views_dir = Path(__file__).parent / "templates"
engine = ViewEngine(views_dir)

dashboard_output = asyncio.run(engine.render("dashboard", {"title": "Dashboard"}))

# A view that contributes nothing still renders every block
plain_output = asyncio.run(engine.render("plain", {"title": "Plain"}))


def main() -> None:
    print("=== Dashboard ===")
    print(dashboard_output)
    print()
    print("=== Plain ===")
    print(plain_output)


if __name__ == "__main__":
    main()
