"""Quickstart demo for canonjson."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from canonjson import UnsupportedFloat, canonical_bytes, is_canonical, sha256_hex


@dataclass
class Refund:
    """Fields declared out of order on purpose."""

    user_id: str
    amount_cents: int
    approved: bool


class Receipt(BaseModel):
    refund: dict[str, object]
    note: str


def main() -> None:
    refund = Refund(user_id="user_123", amount_cents=25000, approved=True)

    print("Demo 1: Dataclass fields are emitted in byte order")
    data = canonical_bytes(refund)
    print(f"  {data.decode('utf-8')}")
    print(f"  sha256: {sha256_hex(refund)}")

    print("\nDemo 2: Insertion order does not change the bytes")
    receipt_a = Receipt(refund={"b": 1, "a": 2}, note='says "thanks"')
    receipt_b = Receipt(refund={"a": 2, "b": 1}, note='says "thanks"')
    print(f"  equal: {canonical_bytes(receipt_a) == canonical_bytes(receipt_b)}")
    print(f"  canonical check: {is_canonical(canonical_bytes(receipt_a))}")

    print("\nDemo 3: Floats are refused")
    try:
        canonical_bytes({"amount": 250.0})
    except UnsupportedFloat as e:
        print(f"  Rejected: {e}")

    print("\nFrom the shell:")
    print("  canonjson canonicalize input.json --output canonical.json")
    print("  canonjson hash input.json")


if __name__ == "__main__":
    main()
