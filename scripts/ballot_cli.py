#!/usr/bin/env python3
"""Command-line access to a deployed voting contract.

Configuration comes from ``BALLOT_*`` environment variables (see
:meth:`pyballot.config.BallotConfig.from_env`). Mutating commands need a
signing key in ``BALLOT_PRIVATE_KEY``.

Examples::

    python scripts/ballot_cli.py status
    python scripts/ballot_cli.py vote 2
    python scripts/ballot_cli.py watch --seconds 60
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyballot import (  # noqa: E402
    BallotClient,
    BallotConfig,
    BallotError,
    ElectionViewModel,
    LocalAccountSigner,
    TransactionRequest,
    TransactionStatus,
)


def _print_view(view: ElectionViewModel, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(view.model_dump(mode="json"), indent=2))
        return
    print(f"Status:  {view.status_label}")
    if view.window_start is not None:
        print(f"Window:  {view.window_start.isoformat()} -> {view.window_end.isoformat() if view.window_end else '?'}")
    print(f"Leader:  {view.leader_label}")
    print(f"Votes:   {view.total_votes}")
    for share in view.shares:
        marker = "*" if share.is_leader else " "
        candidate = share.candidate
        print(f" {marker} #{candidate.id:<3} {candidate.name:<24} {candidate.vote_count:>6}  {share.label}")


def _print_record(client: BallotClient, record: TransactionRequest) -> int:
    url = client.transaction_url(record)
    print(f"{record.kind}: {record.status}" + (f" ({url})" if url else ""))
    if record.status == TransactionStatus.FAILED:
        print(f"  error [{record.error_code}]: {record.error_message}")
        return 1
    return 0


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query or drive a VotingSystem contract.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Print candidates, tally and phase.")
    status.add_argument("--json", action="store_true", help="Print the view as JSON.")

    add = sub.add_parser("add", help="Add a candidate (admin, before voting starts).")
    add.add_argument("name")

    start = sub.add_parser("start", help="Start voting (admin).")
    start.add_argument("days", type=int)

    sub.add_parser("end", help="End voting (admin).")

    vote = sub.add_parser("vote", help="Cast a vote.")
    vote.add_argument("candidate_id", type=int)

    watch = sub.add_parser("watch", help="Follow the countdown and contract events.")
    watch.add_argument("--seconds", type=float, default=30.0)
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    config = BallotConfig.from_env()
    private_key = os.environ.get("BALLOT_PRIVATE_KEY")
    signer = LocalAccountSigner(private_key) if private_key else None

    def _on_update(view: ElectionViewModel) -> None:
        if args.command == "watch":
            print(f"[update] {view.status_label}, leader: {view.leader_label}, votes: {view.total_votes}")

    def _on_tick(label: str) -> None:
        print(f"[countdown] {label}")

    async with BallotClient(
        config,
        signer=signer,
        on_update=_on_update,
        on_tick=_on_tick if args.command == "watch" else None,
    ) as client:
        view = await client.refresh()

        if args.command == "status":
            _print_view(view, as_json=args.json)
            if client.signer_address:
                print(f"Account: {client.signer_address} admin={client.is_admin()} voted={client.has_voted()}")
            return 0
        if args.command == "watch":
            await asyncio.sleep(args.seconds)
            return 0
        if signer is None:
            print("BALLOT_PRIVATE_KEY is required for this command")
            return 2

        if args.command == "add":
            record = await client.add_candidate(args.name)
        elif args.command == "start":
            record = await client.start_voting(args.days)
        elif args.command == "end":
            record = await client.end_voting()
        else:
            record = await client.cast_vote(args.candidate_id)
        return _print_record(client, record)


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return asyncio.run(_run(args))
    except BallotError as exc:
        print(f"{type(exc).__name__}: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
