#!/usr/bin/env python3
"""Ad hoc runner for the Recipe Vision flow.

Walks one image through the whole session without starting the API server:
upload -> confirm -> recipe.

Usage:
    python query.py images/pasta.jpg
    python query.py --exclude basil --exclude "olive oil" images/pasta.jpg
    python query.py --debug images/pasta.jpg  # Show full JSON of the session result

Features:
- Encodes the image file as a data URI, as the browser file picker does
- Prints the detected ingredients, then confirms all except --exclude ones
- Renders the formatted recipe and serving suggestions with rich
"""

import asyncio
import base64
import sys
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown

from recipe_vision.flows.images import detect_image_mime
from recipe_vision.models.errors import RecipeVisionError
from recipe_vision.session.session import RecipeVisionSession, Step
from recipe_vision.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] [--exclude INGREDIENT ...] IMAGE_PATH'


def load_image_as_data_uri(image_path: str) -> str:
    """Read an image file and encode it as ``data:<mime>;base64,<data>``."""
    image_bytes = Path(image_path).read_bytes()
    mime_type = detect_image_mime(image_bytes) or "application/octet-stream"
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    logger.info(f"✓ Loaded image: {Path(image_path).name} ({len(encoded) / 1024:.1f} KB base64)")
    return f"data:{mime_type};base64,{encoded}"


async def run_session(image_path: str, exclude: list[str], debug: bool = False) -> int:
    """Run one session end to end and print the outcome.

    Returns:
        Process exit code (0 on success).
    """
    session = RecipeVisionSession()

    await session.select_image(load_image_as_data_uri(image_path))
    if session.step is not Step.CONFIRM:
        console.print(f"[red]✗ {session.error}[/red]")
        return 1

    console.print("[bold cyan]Detected ingredients[/bold cyan]")
    for ingredient in session.ingredients:
        marker = "[red]✗[/red]" if ingredient in exclude else "[green]✓[/green]"
        console.print(f"  {marker} {ingredient}")
    console.print()

    for ingredient in exclude:
        if ingredient in session.confirmed_ingredients:
            session.toggle_ingredient(ingredient)

    await session.generate_recipe()
    if session.recipe is None:
        console.print(f"[red]✗ {session.error}[/red]")
        return 1

    if debug:
        console.print("[bold cyan]Debug Mode: Full Recipe[/bold cyan]")
        console.print_json(data=session.recipe.model_dump(by_alias=True))
        console.print()

    console.print(Markdown("\n\n".join(session.recipe.paragraphs)))
    console.print()
    console.print("[bold cyan]Serving suggestions[/bold cyan]")
    console.print(session.recipe.serving_suggestions)
    return 0


if __name__ == "__main__":
    debug_mode = False
    excluded: list[str] = []
    args = sys.argv[1:]

    while args and args[0].startswith("--"):
        flag = args.pop(0)
        if flag == "--debug":
            debug_mode = True
        elif flag == "--exclude":
            if not args:
                print("Error: --exclude flag requires an ingredient name")
                sys.exit(1)
            excluded.append(args.pop(0))
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    if len(args) != 1:
        print(USAGE)
        sys.exit(1)

    if not Path(args[0]).exists():
        console.print(f"[red]✗ Error: Image file not found: {args[0]}[/red]")
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run_session(args[0], excluded, debug=debug_mode)))
    except RecipeVisionError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
