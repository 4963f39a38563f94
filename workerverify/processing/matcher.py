"""Exact-then-suffix lookup of a worker within one factory."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from workerverify.core.models import WorkerRecord, normalize_factory

ID_FIELDS = ("nik", "ktp")


@dataclass(frozen=True)
class MatchPolicy:
    """How user input is compared against NIK/KTP.

    ``suffix_rules`` maps an input length to the id fields that may be
    suffix-matched when no exact match exists.
    """

    case_insensitive: bool = True
    suffix_rules: Dict[int, Tuple[str, ...]] = field(default_factory=dict)

    def normalize(self, value: str) -> str:
        text = (value or "").strip()
        return text.lower() if self.case_insensitive else text


SPLIT_SUFFIX_POLICY = MatchPolicy(
    case_insensitive=True,
    suffix_rules={5: ("nik",), 6: ("nik",), 7: ("ktp",)},
)
FIXED_SUFFIX_POLICY = MatchPolicy(
    case_insensitive=False,
    suffix_rules={5: ("nik", "ktp")},
)
DEFAULT_POLICY = SPLIT_SUFFIX_POLICY

POLICIES = {
    "split": SPLIT_SUFFIX_POLICY,
    "fixed": FIXED_SUFFIX_POLICY,
}


def policy_for(name: str, case_sensitive: Optional[bool] = None) -> MatchPolicy:
    """Resolve a named policy, optionally overriding its case handling."""

    try:
        policy = POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown match policy {name!r}; expected one of {sorted(POLICIES)}") from None
    if case_sensitive is None:
        return policy
    return MatchPolicy(case_insensitive=not case_sensitive, suffix_rules=dict(policy.suffix_rules))


def match(
    records: Iterable[WorkerRecord],
    factory_key: str,
    raw_input: str,
    policy: MatchPolicy = DEFAULT_POLICY,
) -> Optional[WorkerRecord]:
    """Return the first record of ``factory_key`` matching ``raw_input``, if any."""

    needle = policy.normalize(raw_input)
    if not needle:
        return None

    factory = normalize_factory(factory_key)
    pool = [record for record in records if record.factory == factory]

    for record in pool:
        if any(policy.normalize(getattr(record, name)) == needle for name in ID_FIELDS):
            return record

    fields = policy.suffix_rules.get(len(needle))
    if not fields:
        return None
    for record in pool:
        if any(policy.normalize(getattr(record, name)).endswith(needle) for name in fields):
            return record
    return None
