"""Pre- and post-processing rules applied around flattening."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .constants import PROCESSED_CATEGORIES_KEY, REDDIT_DESCRIPTION_KEY, PostProcessParserRule


RuleFn = Callable[[Dict[str, str]], Dict[str, str]]
RuleRequest = Union[PostProcessParserRule, str]


def run_pre_process_rules(raw: Mapping[str, Any]) -> Dict[str, str]:
    """Seed fields derived from the raw record before flattening."""
    record: Dict[str, str] = {}
    categories = raw.get("categories")
    if isinstance(categories, list) and all(isinstance(item, str) for item in categories):
        record[PROCESSED_CATEGORIES_KEY] = ",".join(categories)
    return record


def _strip_reddit_comment_link(record: Dict[str, str]) -> Dict[str, str]:
    description = record.get("description")
    if not isinstance(description, str):
        return record
    updated = dict(record)
    updated[REDDIT_DESCRIPTION_KEY] = description.replace("[link]", "", 1).replace("[comments]", "", 1)
    return updated


POST_PROCESS_RULES: Dict[PostProcessParserRule, RuleFn] = {
    PostProcessParserRule.REDDIT_COMMENT_LINK: _strip_reddit_comment_link,
}


def as_rule_list(rules: Union[RuleRequest, Iterable[RuleRequest], None]) -> Optional[List[RuleRequest]]:
    """Normalize a rule request; a single rule counts as a one-element list."""
    if rules is None:
        return None
    if isinstance(rules, str):
        return [rules]
    return list(rules)


def _recognized(rules: Iterable[RuleRequest]) -> set[PostProcessParserRule]:
    recognized: set[PostProcessParserRule] = set()
    for rule in rules:
        try:
            recognized.add(PostProcessParserRule(rule))
        except ValueError:
            continue
    return recognized


def run_post_process_rules(
    record: Dict[str, str], rules: Union[RuleRequest, Iterable[RuleRequest], None] = None
) -> Dict[str, str]:
    """Apply each requested rule in declaration order; unknown rules are no-ops."""
    requested_rules = as_rule_list(rules)
    if not requested_rules:
        return record
    requested = _recognized(requested_rules)
    article = dict(record)
    for rule, transform in POST_PROCESS_RULES.items():
        if rule in requested:
            article = transform(article)
    return article
