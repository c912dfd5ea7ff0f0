"""Hello World -- the simplest hbview example.

Serves templates from memory with DictLoader and renders one view inside
the default layout. No templates directory needed.

Run:
    python app.py
"""

import asyncio

from hbview import DictLoader, ViewEngine

loader = DictLoader(
    {
        "/views/hello.hbs": "Hello, {{name}}!",
        "/views/layouts/main.hbs": "<p>{{{body}}}</p>",
    }
)
engine = ViewEngine("/views", loader=loader, partials_folder=())

# Render with the default layout ("main")
output = asyncio.run(engine.render("hello", {"name": "World"}))

# Render the bare view
bare_output = asyncio.run(engine.render("hello", {"name": "World", "layout": None}))


def main() -> None:
    print(output)
    print(bare_output)
    print()

    # Multiple renders with different context
    for name in ["Handlebars", "Layouts", "Python"]:
        print(asyncio.run(engine.render("hello", {"name": name})))


if __name__ == "__main__":
    main()
