"""Buffers for objects whose members are still being received."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Member:
    """One key/value pair under construction.

    Bytes go to ``key`` until ``finish_key`` is called, then to ``value``.
    The switch is one-way.
    """

    key: bytearray = field(default_factory=bytearray)
    value: bytearray = field(default_factory=bytearray)
    key_finished: bool = False

    def push(self, data: bytes) -> None:
        if self.key_finished:
            self.value += data
        else:
            self.key += data

    def finish_key(self) -> None:
        self.key_finished = True


@dataclass(slots=True)
class Frame:
    """An open object; members are kept in event order until close."""

    members: list[Member] = field(default_factory=list)

    def push_member(self) -> Member:
        member = Member()
        self.members.append(member)
        return member

    def current_member(self) -> Member | None:
        if not self.members:
            return None
        return self.members[-1]

    def render(self) -> bytes:
        """Return ``{key:value,...}`` with members in ascending key-byte order.

        Keys compare as their emitted bytes, quotes and escapes included.
        ``sorted`` is stable, so byte-identical keys keep event order.
        """
        ordered = sorted(self.members, key=lambda member: bytes(member.key))
        out = bytearray(b"{")
        for index, member in enumerate(ordered):
            if index:
                out += b","
            out += member.key
            out += b":"
            out += member.value
        out += b"}"
        return bytes(out)
