from html_converter import MarkdownConverter
from markdown_utils import (
    extract_timeline_rows,
    find_section,
    parse_markdown_sections,
    split_section_content,
)


def sample_briefing():
    return "\n".join(
        [
            "Intro line before any header",
            "## 1. Resumo e KPIs",
            "First paragraph",
            "continues here",
            "",
            "- bullet one",
            "* bullet two",
            "<details><summary>Detalhar canais</summary>",
            "hidden detail",
            "</details>",
            "## 2. Timeline",
            "| Period | Activity | Description |",
            "|---|---|---|",
            "| W1 | Setup | Configure |",
            "| W2 | Run | Execute |",
        ]
    )


def test_timeline_rows_from_briefing():
    sections = parse_markdown_sections("## 2. Timeline\n| W1 | Setup | Configure |\n| W2 | Run | Execute |")
    rows = extract_timeline_rows(sections["2. Timeline"])
    assert [(row.period, row.activity, row.description) for row in rows] == [
        ("W1", "Setup", "Configure"),
        ("W2", "Run", "Execute"),
    ]


def test_lines_before_first_header_use_default_bucket():
    sections = parse_markdown_sections(sample_briefing())
    assert sections["Content"] == ["Intro line before any header"]
    assert list(sections) == ["Content", "1. Resumo e KPIs", "2. Timeline"]


def test_empty_markdown_has_only_default_bucket():
    assert parse_markdown_sections(None) == {"Content": []}
    assert parse_markdown_sections("") == {"Content": []}


def test_deeper_headers_are_content():
    sections = parse_markdown_sections("## Main\n### Sub\ntext")
    assert sections["Main"] == ["### Sub", "text"]


def test_repeated_title_appends_to_first_bucket():
    sections = parse_markdown_sections("## A\none\n## B\ntwo\n## A\nthree")
    assert sections["A"] == ["one", "three"]


def test_paragraphs_bullets_and_sentinels():
    sections = parse_markdown_sections(sample_briefing())
    content = split_section_content(sections["1. Resumo e KPIs"])
    assert content.paragraphs == ["First paragraph continues here", "hidden detail"]
    assert content.bullets == ["bullet one", "bullet two"]


def test_table_lines_are_not_paragraphs():
    content = split_section_content(["| a | b | c |", "text"])
    assert content.paragraphs == ["text"]
    assert content.bullets == []


def test_header_and_separator_rows():
    sections = parse_markdown_sections(sample_briefing())
    rows = extract_timeline_rows(sections["2. Timeline"])
    # the header row is kept as data; separators are dropped
    assert [row.period for row in rows] == ["Period", "W1", "W2"]


def test_short_rows_are_skipped():
    assert extract_timeline_rows(["| only | two |"]) == []


def test_find_section_uses_first_known_title():
    sections = {"Content": [], "1. Summary and KPIs": ["english"]}
    assert find_section(sections, ["1. Resumo e KPIs", "1. Summary and KPIs"]) == ["english"]
    assert find_section(sections, ["missing"]) == []


def test_converter_escapes_raw_html():
    html = MarkdownConverter().convert("# Title\n\n<script>alert(1)</script>\n\nSome *text*")
    assert "<h1>Title</h1>" in html
    assert "<em>text</em>" in html
    assert "<script>" not in html


def test_converter_handles_empty_input():
    assert MarkdownConverter().convert(None) == ""
    assert MarkdownConverter().convert("") == ""
