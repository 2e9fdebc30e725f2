# Command line access to the RPM Life stores + the API server

import argparse
import json
import sys

from rpm_life.planning.block_summary import summarize_block
from rpm_life.seed import seed_categories
from rpm_life.store.errors import StoreError
from rpm_life.store.registry import build_repositories
from rpm_life.utils.config import CONFIG
from rpm_life.utils.debug import setup_logging

RESOURCE_CHOICES = sorted(CONFIG["resources"])


def _parse_json(text: str):
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Invalid JSON: {e}")


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_init(args):
    repos = build_repositories(args.config)
    for name, repo in repos.items():
        print(f"{name}: {len(repo.list())} record(s) ({repo.store!r})")


def cmd_serve(args):
    import uvicorn

    uvicorn.run(
        "rpm_life.main:create_app",
        factory=True,
        host=args.host or args.config["server"]["host"],
        port=args.port or args.config["server"]["port"],
        reload=args.reload,
    )


def cmd_list(args):
    repo = build_repositories(args.config)[args.resource]
    rows = repo.list()
    for r in rows:
        title = r.get("name") or r.get("result") or r.get("title") or r.get("date") or ""
        print(f"{r.get('id')} | {title}")
    print(f"({len(rows)} {args.resource})")


def cmd_add(args):
    repo = build_repositories(args.config)[args.resource]
    rec = repo.create(_parse_json(args.json))
    print(f"Added {repo.label} (id={rec['id']})")


def cmd_update(args):
    repo = build_repositories(args.config)[args.resource]
    rec = repo.update(args.id, _parse_json(args.json))
    _print_json(rec)


def cmd_delete(args):
    repo = build_repositories(args.config)[args.resource]
    print(repo.delete(args.id)["message"])


def cmd_seed(args):
    added = seed_categories(build_repositories(args.config)["categories"])
    if added:
        print(f"Seeded {added} categories.")
    else:
        print("Categories store is not empty; nothing seeded.")


def cmd_summary(args):
    block = build_repositories(args.config)["rpmblocks"].get(args.id)
    s = summarize_block(block)
    print(f"=== {block.get('result') or block.get('id')} ===")
    print(f"actions: {s['actions']}  total: {s['totalTime']}  must: {s['mustTime']}")
    for key, n in s["byKey"].items():
        if n:
            print(f"  {key or '(none)'}: {n}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rpm-life", description="RPM Life CLI")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    sub = p.add_subparsers(required=True)

    sp = sub.add_parser("init", help="Create missing stores and report their size")
    sp.set_defaults(func=cmd_init)

    sp = sub.add_parser("serve", help="Run the API server")
    sp.add_argument("--host")
    sp.add_argument("--port", type=int)
    sp.add_argument("--reload", action="store_true")
    sp.set_defaults(func=cmd_serve)

    sp = sub.add_parser("list", help="List records of a resource")
    sp.add_argument("resource", choices=RESOURCE_CHOICES)
    sp.set_defaults(func=cmd_list)

    sp = sub.add_parser("add", help="Create a record from a JSON object")
    sp.add_argument("resource", choices=RESOURCE_CHOICES)
    sp.add_argument("json", help='e.g. \'{"name": "Health", "type": "personal"}\'')
    sp.set_defaults(func=cmd_add)

    sp = sub.add_parser("update", help="Replace a record by id")
    sp.add_argument("resource", choices=RESOURCE_CHOICES)
    sp.add_argument("id")
    sp.add_argument("json")
    sp.set_defaults(func=cmd_update)

    sp = sub.add_parser("delete", help="Delete a record by id")
    sp.add_argument("resource", choices=RESOURCE_CHOICES)
    sp.add_argument("id")
    sp.set_defaults(func=cmd_delete)

    sp = sub.add_parser("seed", help="Write starter categories into an empty store")
    sp.set_defaults(func=cmd_seed)

    sp = sub.add_parser("summary", help="Time totals for an RPM block")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_summary)

    return p


def main(argv=None, config=None):
    args = build_parser().parse_args(argv)
    args.config = config or CONFIG
    setup_logging(args.debug or args.config.get("debug_mode"))
    try:
        args.func(args)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
