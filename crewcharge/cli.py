"""
crewcharge CLI: sanity-check your project key, API key and endpoint.

  crewcharge hash 42 --project-key acme
  crewcharge attach acme_9f2c... --attr pii_name=Alice --attr locale=en --test-user
  crewcharge privacy acme_9f2c... '{"analytics": {"pii": true}}'
  crewcharge log acme_9f2c... signed_up

Keys come from CREWCHARGE_* env vars (or .env) unless passed as flags.
Exit code 0 = ok, 1 = validation/transport error, 2 = bad CLI usage.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from crewcharge import api
from crewcharge.logging_setup import configure_logging
from crewcharge.models import Result


def _parse_attrs(pairs: List[str]) -> Dict[str, Any]:
    attrs: Dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(f"--attr expects key=value, got '{pair}'")
        key, value = pair.split("=", 1)
        attrs[key.strip()] = value
    return attrs


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="crewcharge", description="Crewcharge SDK command line")
    p.add_argument("--api-key", default=None, help="Overrides CREWCHARGE_API_KEY")
    p.add_argument("--analytics-tag", default=None, help="Overrides CREWCHARGE_ANALYTICS_TAG")
    sub = p.add_subparsers(dest="command", required=True)

    h = sub.add_parser("hash", help="Hash a raw user id")
    h.add_argument("raw_identifier")
    h.add_argument("--project-key", default=None, help="Overrides CREWCHARGE_PROJECT_KEY")

    a = sub.add_parser("attach", help="Attach attributes to a user")
    a.add_argument("uid_hashed")
    a.add_argument("--attr", action="append", default=[], metavar="KEY=VALUE")
    a.add_argument("--test-user", action="store_true")

    pr = sub.add_parser("privacy", help="Change a user's privacy preferences")
    pr.add_argument("uid_hashed")
    pr.add_argument("preferences", help="JSON object, e.g. '{\"analytics\": {\"pii\": true}}'")

    lg = sub.add_parser("log", help="Log a trigger for a user")
    lg.add_argument("uid_hashed")
    lg.add_argument("trigger_key")
    return p


async def _run(args: argparse.Namespace) -> Result:
    common = {"api_key": args.api_key, "analytics_tag": args.analytics_tag}
    if args.command == "attach":
        return await api.attach_user_attributes(
            args.uid_hashed, _parse_attrs(args.attr), test_user=args.test_user, **common
        )
    if args.command == "privacy":
        return await api.change_privacy_preferences(args.uid_hashed, json.loads(args.preferences), **common)
    return await api.log_trigger(args.uid_hashed, args.trigger_key, **common)


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    try:
        if args.command == "hash":
            result = api.gen_hash(args.project_key, args.raw_identifier)
            out = result.to_dict()
            if result.ok:
                out["hash"] = result.value.value
        else:
            result = asyncio.run(_run(args))
            out = result.to_dict()
    except (argparse.ArgumentTypeError, json.JSONDecodeError) as e:
        parser.error(str(e))

    print(json.dumps(out, ensure_ascii=False))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
