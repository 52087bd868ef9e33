"""
strict-json: large list mapping benchmark.

Purpose
- Time ``StrictJson.map_to_array_of`` on a generated list of user records.
- Compare against a hand-written decoder doing the same checks inline.
"""

from __future__ import annotations

import argparse
import json
import random
import statistics
import sys
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"

_FIRST_NAMES = ("Joe", "Tim", "Ana", "Bob", "Mia", "Lee", "Kai", "Zoe")
_STREETS = ("Fake St.", "Main St.", "Elm Ave.", "Oak Rd.")


def _ensure_src_path() -> None:
    if str(SRC_PATH) not in sys.path:
        sys.path.insert(0, str(SRC_PATH))


@dataclass(frozen=True, slots=True)
class Address:
    street: str
    zip_code: str


@dataclass(frozen=True, slots=True)
class Event:
    name: str
    date: str
    is_suit_required: bool = False


@dataclass(frozen=True, slots=True)
class User:
    name: str
    age: int
    address: Address
    events_attended: list[Event] = field(default_factory=list)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark map_to_array_of against a hand-written decoder.",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=1000,
        help="Number of generated user records.",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=20,
        help="Timed iterations per decoder.",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Optional JSON file with a list of user records instead of generated data.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for generated data.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON output.",
    )
    return parser.parse_args(argv)


def generate_users(count: int, *, seed: int = 0) -> list[dict[str, object]]:
    rng = random.Random(seed)
    users: list[dict[str, object]] = []
    for index in range(count):
        events = [
            {
                "name": f"Event {index}-{event}",
                "date": f"2013-02-{rng.randint(10, 28)}T08:35:34Z",
                "is_suit_required": rng.random() < 0.5,
            }
            for event in range(rng.randint(0, 3))
        ]
        users.append(
            {
                "name": f"{rng.choice(_FIRST_NAMES)} User {index}",
                "age": rng.randint(1, 99),
                "address": {
                    "street": f"{rng.randint(1, 9999)} {rng.choice(_STREETS)}",
                    "zip_code": f"{rng.randint(0, 99999):05d}",
                },
                "events_attended": events,
            }
        )
    return users


def decode_handwritten(text: str) -> list[User]:
    decoded = json.loads(text)
    if not isinstance(decoded, list):
        raise ValueError("Invalid JSON")

    users: list[User] = []
    for item in decoded:
        name = item.get("name")
        age = item.get("age")
        address = item.get("address") or {}
        street = address.get("street")
        zip_code = address.get("zip_code")
        if (
            not isinstance(name, str)
            or not isinstance(age, int)
            or isinstance(age, bool)
            or not isinstance(street, str)
            or not isinstance(zip_code, str)
        ):
            raise ValueError("Invalid JSON")

        events: list[Event] = []
        for raw_event in item.get("events_attended", []):
            event_name = raw_event.get("name")
            date = raw_event.get("date")
            suit = raw_event.get("is_suit_required", False)
            if not isinstance(event_name, str) or not isinstance(date, str) or not isinstance(suit, bool):
                raise ValueError("Invalid JSON")
            events.append(Event(event_name, date, suit))

        users.append(User(name, age, Address(street, zip_code), events))
    return users


def _time(function: Callable[[], object], iterations: int) -> list[float]:
    samples: list[float] = []
    for _ in range(iterations):
        started = time.perf_counter()
        function()
        samples.append(time.perf_counter() - started)
    return samples


def _summary(samples: list[float]) -> dict[str, float]:
    return {
        "mean_ms": round(statistics.fmean(samples) * 1000, 3),
        "median_ms": round(statistics.median(samples) * 1000, 3),
        "min_ms": round(min(samples) * 1000, 3),
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.count < 0 or args.iterations < 1:
        print("error: --count must be >= 0 and --iterations >= 1", file=sys.stderr)
        return 2

    _ensure_src_path()
    from strict_json import StrictJson, StrictJsonError

    if args.input is not None:
        text = args.input.read_text(encoding="utf-8")
    else:
        text = json.dumps(generate_users(args.count, seed=args.seed))

    mapper = StrictJson.builder().add_array_parameter_adapter(User, "events_attended", Event).build()

    try:
        mapped = mapper.map_to_array_of(text, User)
        handwritten = decode_handwritten(text)
        if mapped != handwritten:
            raise ValueError("mapped and hand-written results differ")
        strict_samples = _time(lambda: mapper.map_to_array_of(text, User), args.iterations)
        handwritten_samples = _time(lambda: decode_handwritten(text), args.iterations)
    except (StrictJsonError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    payload: dict[str, Any] = {
        "records": len(mapped),
        "iterations": args.iterations,
        "strict_json": _summary(strict_samples),
        "handwritten": _summary(handwritten_samples),
    }
    payload["ratio"] = round(
        payload["strict_json"]["mean_ms"] / max(payload["handwritten"]["mean_ms"], 1e-9), 2
    )

    if args.json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        print(f"records:      {payload['records']}")
        print(f"iterations:   {payload['iterations']}")
        for label in ("strict_json", "handwritten"):
            stats = payload[label]
            print(
                f"{label:<13} mean {stats['mean_ms']:.3f} ms  "
                f"median {stats['median_ms']:.3f} ms  min {stats['min_ms']:.3f} ms"
            )
        print(f"ratio:        {payload['ratio']}x")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
