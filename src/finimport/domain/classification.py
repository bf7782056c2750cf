"""Rule-based transaction classification.

Rules come from the institution maps file as an ordered list of
``{"match": <regex>, "category": <name>, "party": <name>}`` objects. Each
pattern is compiled case-insensitively when the maps are loaded; the first
rule whose pattern is found in a transaction description wins.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional, Sequence

from finimport.domain.entities import (
    ClassificationRule,
    ImportContext,
    TransactionCandidate,
)
from finimport.domain.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedRule:
    """Classification rule with its category bound to a store id."""

    pattern: re.Pattern
    category_id: Optional[int]
    party_name: Optional[str]


def compile_rules(raw_rules: Any, institution_key: str = "") -> tuple[ClassificationRule, ...]:
    """Compile raw rule objects into ClassificationRule tuples.

    Rules with an invalid pattern or without a ``match`` string are dropped
    with a warning; the remaining rules keep their configured order.

    Raises:
        ConfigError: If ``raw_rules`` is not a list
    """
    if raw_rules is None:
        return ()
    if not isinstance(raw_rules, list):
        raise ConfigError(f"'rules' for '{institution_key}' must be a list")

    compiled = []
    for index, raw in enumerate(raw_rules):
        match = raw.get("match") if isinstance(raw, dict) else None
        if not isinstance(match, str) or not match:
            logger.warning("Dropping rule %d for '%s': missing 'match' pattern", index, institution_key)
            continue
        try:
            pattern = re.compile(match, re.IGNORECASE)
        except re.error as e:
            logger.warning("Dropping rule %d for '%s': invalid regex %r (%s)", index, institution_key, match, e)
            continue
        compiled.append(
            ClassificationRule(
                pattern=pattern,
                category=raw.get("category") or None,
                party=raw.get("party") or None,
            )
        )
    return tuple(compiled)


def resolve_rules(rules: Iterable[ClassificationRule], context: ImportContext) -> list[ResolvedRule]:
    """Bind rule category names to category ids.

    A rule naming an unknown category keeps matching (and can still set a
    party) but no longer overrides the category.
    """
    resolved = []
    for rule in rules:
        category_id = None
        if rule.category is not None:
            category_id = context.category_id(rule.category)
            if category_id is None:
                logger.warning(
                    "Rule %r names unknown category '%s'; category override ignored",
                    rule.pattern.pattern,
                    rule.category,
                )
        resolved.append(ResolvedRule(pattern=rule.pattern, category_id=category_id, party_name=rule.party))
    return resolved


def find_matching_rule(description: Optional[str], rules: Sequence[ResolvedRule]) -> Optional[ResolvedRule]:
    """Return the first rule whose pattern occurs in the description."""
    normalized = description.lower() if description else ""
    for rule in rules:
        if rule.pattern.search(normalized):
            return rule
    return None


def apply_rules(candidate: TransactionCandidate, rules: Sequence[ResolvedRule]) -> TransactionCandidate:
    """Apply the first matching rule's overrides to a candidate.

    Returns the candidate unchanged when no rule matches.
    """
    rule = find_matching_rule(candidate.description, rules)
    if rule is None:
        return candidate

    changes: dict[str, Any] = {}
    if rule.category_id is not None:
        changes["category_id"] = rule.category_id
    if rule.party_name:
        changes["party_name"] = rule.party_name
    return replace(candidate, **changes) if changes else candidate
