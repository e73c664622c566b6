from __future__ import annotations

from article_parser.constants import PostProcessParserRule
from article_parser.rules import POST_PROCESS_RULES, run_post_process_rules, run_pre_process_rules


def test_string_categories_are_joined():
    assert run_pre_process_rules({"categories": ["a", "b"]}) == {"processed::categories": "a,b"}


def test_mixed_categories_are_ignored():
    assert run_pre_process_rules({"categories": ["a", 2]}) == {}
    assert run_pre_process_rules({"categories": "a,b"}) == {}
    assert run_pre_process_rules({}) == {}


def test_reddit_rule_strips_markers_without_touching_description():
    record = {"description": "hello [link] world [comments]"}

    result = run_post_process_rules(record, [PostProcessParserRule.REDDIT_COMMENT_LINK])

    assert result["processed::description::reddit1"] == "hello  world "
    assert result["description"] == "hello [link] world [comments]"
    assert "processed::description::reddit1" not in record


def test_rule_accepts_string_value():
    result = run_post_process_rules({"description": "[link]"}, ["REDDIT_COMMENT_LINK"])
    assert result["processed::description::reddit1"] == ""


def test_absent_or_empty_rules_return_record_unchanged():
    record = {"description": "hello [link]"}

    assert run_post_process_rules(record, None) is record
    assert run_post_process_rules(record, []) is record


def test_unknown_rules_are_noops():
    record = {"description": "hello [link]"}
    assert run_post_process_rules(record, ["NOT_A_RULE"]) == record


def test_reddit_rule_requires_description():
    assert run_post_process_rules({"title": "t"}, [PostProcessParserRule.REDDIT_COMMENT_LINK]) == {"title": "t"}


def test_every_rule_has_a_transform():
    assert set(POST_PROCESS_RULES) == set(PostProcessParserRule)


def test_single_rule_is_treated_as_one_element_list():
    record = {"description": "a [link] b"}

    by_name = run_post_process_rules(record, "REDDIT_COMMENT_LINK")
    by_member = run_post_process_rules(record, PostProcessParserRule.REDDIT_COMMENT_LINK)

    assert by_name["processed::description::reddit1"] == "a  b"
    assert by_member == by_name
