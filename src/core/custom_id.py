"""
Custom ID Codec

Encodes and decodes the colon-delimited identifiers carried by every control
the console renders:

    dashboardId:screenId:actionId[:operationId[:argName:argValue]...]

The identifier is the only state that survives between two requests, so the
codec is strict: segments containing the separator are rejected instead of
escaped, and ids longer than the transport limit raise instead of being cut.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from src.core.exceptions import (
    EncodingError,
    IdentifierTooLongError,
    MalformedIdentifierError,
)

SEPARATOR = ":"

# Chat platforms cap custom ids at 100 characters
MAX_LENGTH = 100

# dashboard, screen, action
MIN_SEGMENTS = 3

ArgPairs = Iterable[tuple[str, str]] | Mapping[str, str]


def arg_pairs(args: ArgPairs | None) -> list[tuple[str, str]]:
    if args is None:
        return []
    if isinstance(args, Mapping):
        return [(str(k), str(v)) for k, v in args.items()]
    return [(str(k), str(v)) for k, v in args]


def _check_segment(value: str, what: str) -> str:
    if not value:
        raise EncodingError(f"Empty {what} cannot be encoded in a custom id")
    if SEPARATOR in value:
        raise EncodingError(
            f"{what.capitalize()} {value!r} contains the reserved character {SEPARATOR!r}"
        )
    return value


def _join(parts: list[str], max_length: int) -> str:
    custom_id = SEPARATOR.join(parts)
    if len(custom_id) > max_length:
        raise IdentifierTooLongError(len(custom_id), max_length)
    return custom_id


@dataclass(frozen=True)
class CustomId:
    """Decoded form of a custom id."""

    dashboard_id: str
    screen_id: str
    action_id: str
    operation_id: str | None = None
    args: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def get(self, name: str) -> str | None:
        """Return the value of a named argument, or None."""
        for arg_name, value in self.args:
            if arg_name == name:
                return value
        return None

    @property
    def arguments(self) -> dict[str, str]:
        return dict(self.args)

    def with_operation(self, operation_id: str) -> "CustomId":
        return CustomId(
            self.dashboard_id, self.screen_id, self.action_id, operation_id, self.args
        )

    def with_args(self, args: ArgPairs) -> "CustomId":
        """
        Return a copy with the given arguments set.

        Existing arguments with the same name are replaced and move to the end,
        so a trailing page argument stays trailing.
        """
        new_pairs = arg_pairs(args)
        names = {name for name, _ in new_pairs}
        kept = tuple(pair for pair in self.args if pair[0] not in names)
        return CustomId(
            self.dashboard_id,
            self.screen_id,
            self.action_id,
            self.operation_id,
            kept + tuple(new_pairs),
        )

    def without_arg(self, name: str) -> "CustomId":
        return CustomId(
            self.dashboard_id,
            self.screen_id,
            self.action_id,
            self.operation_id,
            tuple(pair for pair in self.args if pair[0] != name),
        )

    def encode(self, max_length: int = MAX_LENGTH) -> str:
        return encode(
            self.dashboard_id,
            self.screen_id,
            self.action_id,
            self.operation_id,
            self.args,
            max_length=max_length,
        )


def encode(
    dashboard_id: str,
    screen_id: str,
    action_id: str,
    operation_id: str | None = None,
    args: ArgPairs | None = None,
    *,
    max_length: int = MAX_LENGTH,
) -> str:
    """
    Build a custom id.

    Args:
        dashboard_id: Dashboard the control belongs to
        screen_id: Screen within the dashboard
        action_id: Action within the screen
        operation_id: Operation the action should run (required when args are given)
        args: Ordered (name, value) pairs or an ordered mapping
        max_length: Transport limit

    Returns:
        The encoded custom id

    Raises:
        EncodingError: A segment is empty, contains the separator, an argument
            name repeats, or arguments are given without an operation
        IdentifierTooLongError: The result exceeds max_length
    """
    parts = [
        _check_segment(dashboard_id, "dashboard id"),
        _check_segment(screen_id, "screen id"),
        _check_segment(action_id, "action id"),
    ]

    pairs = arg_pairs(args)
    if pairs and not operation_id:
        raise EncodingError("Arguments require an operation id")

    if operation_id:
        parts.append(_check_segment(operation_id, "operation id"))

    seen: set[str] = set()
    for name, value in pairs:
        if name in seen:
            raise EncodingError(f"Argument {name!r} appears more than once")
        seen.add(name)
        parts.append(_check_segment(name, "argument name"))
        parts.append(_check_segment(value, f"value of argument {name!r}"))

    return _join(parts, max_length)


def encode_partial(
    dashboard_id: str,
    screen_id: str | None = None,
    *,
    max_length: int = MAX_LENGTH,
) -> str:
    """
    Build a dashboard-only or dashboard:screen prefix.

    Prefixes do not decode on their own; they are used as stable addresses
    (e.g. in logs) and as the base for budget checks.
    """
    parts = [_check_segment(dashboard_id, "dashboard id")]
    if screen_id is not None:
        parts.append(_check_segment(screen_id, "screen id"))
    return _join(parts, max_length)


def decode(raw: str | None) -> CustomId:
    """
    Parse a custom id.

    Raises:
        MalformedIdentifierError: Empty input, fewer than three segments, an
            empty id segment, arguments without an operation, an unpaired or
            empty argument segment, or a repeated argument name
    """
    if not raw:
        raise MalformedIdentifierError(raw, "custom id is empty")

    segments = raw.split(SEPARATOR)
    if len(segments) < MIN_SEGMENTS:
        raise MalformedIdentifierError(
            raw, f"expected at least {MIN_SEGMENTS} segments, got {len(segments)}"
        )
    if any(not segment for segment in segments[:MIN_SEGMENTS]):
        raise MalformedIdentifierError(raw, "empty dashboard, screen or action id")

    operation_id = segments[3] if len(segments) > 3 and segments[3] else None
    rest = segments[4:]
    if rest and operation_id is None:
        raise MalformedIdentifierError(raw, "arguments without an operation id")
    if len(rest) % 2 != 0:
        raise MalformedIdentifierError(raw, f"unpaired argument segment {rest[-1]!r}")
    if any(not segment for segment in rest):
        raise MalformedIdentifierError(raw, "empty argument name or value")

    args: list[tuple[str, str]] = []
    seen: set[str] = set()
    for i in range(0, len(rest), 2):
        name = rest[i]
        if name in seen:
            raise MalformedIdentifierError(raw, f"argument {name!r} appears more than once")
        seen.add(name)
        args.append((name, rest[i + 1]))

    return CustomId(
        dashboard_id=segments[0],
        screen_id=segments[1],
        action_id=segments[2],
        operation_id=operation_id,
        args=tuple(args),
    )


def get_named_argument(raw: str, name: str) -> str | None:
    """Look up an argument by name. Absence is not an error."""
    return decode(raw).get(name)


def remaining_length(raw: str, max_length: int = MAX_LENGTH) -> int:
    """
    Characters left for a single additional `:name:value` pair.

    Both separators are already subtracted, so a pair fits when
    len(name) + len(value) <= remaining_length(raw). Negative when even an
    empty pair would not fit.
    """
    return max_length - len(raw) - 2 * len(SEPARATOR)


def fits(raw: str, args: ArgPairs, max_length: int = MAX_LENGTH) -> bool:
    """Whether appending the argument pairs keeps the id within max_length."""
    extra = sum(len(name) + len(value) + 2 * len(SEPARATOR) for name, value in arg_pairs(args))
    return len(raw) + extra <= max_length
