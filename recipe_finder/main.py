import argparse
import sys

from .catalog import index_catalog
from .config import configure_logging, get_settings
from .errors import EmptySelection, InvalidCatalog
from .matching import search
from .normalize import normalize_many
from .recipes import load_recipes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="recipe-finder")
    parser.add_argument("--catalog", help="Path to the recipe catalog JSON file")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("ingredients", help="List every ingredient in the catalog")

    p_search = sub.add_parser("search", help="Find recipes for some ingredients")
    p_search.add_argument("ingredients", nargs="+")
    p_search.add_argument("--diet", action="append", default=[], help="Dietary tag (repeatable)")
    p_search.add_argument("--mode", choices=["exact", "contains"])
    p_search.add_argument("--ranked", action="store_true", help="Rank by matches instead of a threshold")

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("recipe_finder.app:app", host=args.host, port=args.port)
        return 0

    try:
        catalog = index_catalog(load_recipes(args.catalog or settings.catalog_path))
    except InvalidCatalog as e:
        print(f"Could not load recipe database: {e}", file=sys.stderr)
        return 1

    if args.command == "ingredients":
        for ing in catalog.sorted_vocabulary:
            print(ing)
        return 0

    if args.command == "search":
        try:
            results = search(
                catalog,
                normalize_many(args.ingredients),
                args.diet,
                mode=args.mode or settings.match_mode,
                ranked=args.ranked,
                threshold=settings.match_threshold,
            )
        except EmptySelection:
            print("Please select at least one ingredient.", file=sys.stderr)
            return 2
        if not results:
            print("No recipes found.")
        for r in results:
            print(f"{r.accuracy:5.1f}%  {r.recipe.name}  ({r.matched} matched)")
        return 0

    print(f"Loaded {len(catalog)} recipe(s), {len(catalog.vocabulary)} ingredient(s).")
    if catalog.skipped:
        print(f"Skipped {len(catalog.skipped)} malformed record(s).")
    for r in catalog:
        print(f"- {r.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
