"""Concurrent renders -- many requests, one read and compile per template.

Fires a burst of renders at a cold engine with ``asyncio.gather``.
Concurrent misses for a template share a single in-flight load, so the
cache stats show one compile per template however many requests arrive.

Run:
    python app.py
"""

import asyncio
from pathlib import Path

from hbview import ViewEngine

views_dir = Path(__file__).parent / "templates"
engine = ViewEngine(views_dir, partials_folder=())

REQUESTS = 50


async def burst() -> list[str]:
    return await asyncio.gather(
        *(engine.render("item", {"id": i}) for i in range(1, REQUESTS + 1))
    )


outputs = asyncio.run(burst())
stats = dict(engine.cache.stats)


def main() -> None:
    print(f"Rendered {len(outputs)} pages")
    print(f"Cache stats: {stats}")
    print(outputs[0])


if __name__ == "__main__":
    main()
