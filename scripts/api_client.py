"""Lightweight REST client for the pelada API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _print_json(resp: httpx.Response) -> None:
    print(json.dumps(resp.json(), indent=2, ensure_ascii=False))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pelada REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--players", action="store_true", help="List the roster")
    parser.add_argument("--draft", action="store_true", help="Draft a new batch of teams")
    parser.add_argument("--seed", type=int, default=None, help="Seed used with --draft")
    parser.add_argument("--teams", action="store_true", help="Show drafted teams")
    parser.add_argument("--stats", action="store_true", help="Show scorers, assists and goalkeepers")
    parser.add_argument("--voice", metavar="TEXT", help="Parse a voice command against the roster")
    parser.add_argument("--export-sheet", metavar="SHEET", help="Download one export sheet as CSV")
    parser.add_argument("--export-path", type=Path, help="Destination path for exported CSV")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.players:
            resp = client.get("/players")
            resp.raise_for_status()
            _print_json(resp)
        if args.draft:
            resp = client.post("/teams/draft", json={"seed": args.seed})
            if resp.status_code == 409:
                raise SystemExit(f"draft rejected: {resp.json()['detail']}")
            resp.raise_for_status()
            print(f"Drafted {len(resp.json())} teams")
        if args.teams:
            resp = client.get("/teams")
            resp.raise_for_status()
            for team in resp.json():
                names = ", ".join(player["name"] for player in team["players"])
                print(f"{team['name']}: {names}")
        if args.stats:
            for path in ("/stats/scorers", "/stats/assists", "/stats/goalkeepers"):
                resp = client.get(path)
                resp.raise_for_status()
                print(path)
                _print_json(resp)
        if args.voice:
            resp = client.post("/voice/parse", json={"text": args.voice})
            resp.raise_for_status()
            _print_json(resp)
        if args.export_sheet:
            resp = client.get(f"/export/{args.export_sheet}.csv")
            if resp.status_code == 404:
                raise SystemExit(f"sheet {args.export_sheet} not found")
            resp.raise_for_status()
            if args.export_path:
                args.export_path.write_text(resp.text, encoding="utf-8")
                print(f"CSV export saved to {args.export_path}")
            else:
                print(resp.text)


if __name__ == "__main__":
    main()
