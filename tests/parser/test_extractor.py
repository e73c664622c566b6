from __future__ import annotations

from article_parser.extractor import extract_extra_info, extracted_fields


def test_extracts_images_and_anchors_in_document_order():
    html = (
        '<p><a href="https://x.com">x</a><img src="https://x.com/i.png">'
        '<a>no href</a><img src=""><a href="https://y.com">y</a></p>'
    )

    info = extract_extra_info(html)

    assert info.images == ["https://x.com/i.png"]
    assert info.anchors == ["https://x.com", "https://y.com"]


def test_plain_text_yields_nothing():
    info = extract_extra_info("just some words")
    assert info.images == []
    assert info.anchors == []


def test_extracted_fields_use_synthetic_keys():
    record = {
        "description": '<p><a href="https://x.com">x</a><img src="https://x.com/i.png"></p>',
        "title": "No markup here",
    }

    fields = extracted_fields(record)

    assert fields == {
        "extracted::description::image1": "https://x.com/i.png",
        "extracted::description::anchor1": "https://x.com",
    }


def test_multiple_matches_are_numbered_from_one():
    record = {"content": '<img src="a.png"><img src="b.png">'}

    assert extracted_fields(record) == {
        "extracted::content::image1": "a.png",
        "extracted::content::image2": "b.png",
    }
