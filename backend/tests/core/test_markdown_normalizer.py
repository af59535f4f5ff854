"""Markdown Normalizer tests — tables, fences and SQL blocks in model prose.

Tests cover:
    - (a) table cell spacing in prose
    - (b) separator row synthesis with the header's column count
    - (c) table spacing inside SQL fences, fence lines untouched
    - (d) prose glued to a closing fence moved to its own line
    - (e) SQL keywords upper-cased, quoted literals and other languages untouched
    - Fixpoint: normalize(normalize(x)) == normalize(x)
"""

import pytest

from challenge_forge.core.markdown_normalizer import (
    Region,
    break_after_closing_fence,
    classify_lines,
    insert_missing_separators,
    normalize_markdown,
    uppercase_sql_keywords,
)


def test_table_cells_get_single_spaces():
    text = "|a|b|\n|---|---|\n|1|2|"
    assert normalize_markdown(text) == "| a | b |\n| --- | --- |\n| 1 | 2 |"


def test_separator_row_added_with_header_column_count():
    text = "| a | b | c |\n| 1 | 2 | 3 |"
    assert insert_missing_separators(text) == (
        "| a | b | c |\n| --- | --- | --- |\n| 1 | 2 | 3 |"
    )


def test_existing_separator_row_not_duplicated():
    text = "| a |\n| --- |\n| 1 |"
    assert insert_missing_separators(text) == text


def test_sql_block_table_spacing_keeps_fences():
    text = "```sql\n|id|name|\n```"
    assert normalize_markdown(text) == "```sql\n| id | name |\n```"


def test_prose_after_closing_fence_moves_to_new_line():
    text = "```sql\nSELECT 1;\n```Then some prose."
    assert break_after_closing_fence(text) == "```sql\nSELECT 1;\n```\nThen some prose."


def test_code_before_closing_fence_moves_to_own_line():
    text = "```python\nprint(1)```"
    assert break_after_closing_fence(text) == "```python\nprint(1)\n```"


def test_fence_run_inside_code_line_is_literal():
    text = 'Look:\n```python\nfence = "```"\nprint(fence)\n```\nDone'
    assert normalize_markdown(text) == text
    assert classify_lines(text.split("\n"))[2] is Region.CODE


def test_sql_keywords_uppercased_outside_literals():
    text = "```sql\nselect name from users where id = 'from x';\n```"
    assert uppercase_sql_keywords(text) == (
        "```sql\nSELECT name FROM users WHERE id = 'from x';\n```"
    )


def test_sql_comment_left_alone():
    text = "```sql\nselect 1 -- select from nowhere\n```"
    assert uppercase_sql_keywords(text) == "```sql\nSELECT 1 -- select from nowhere\n```"


def test_other_languages_and_prose_untouched():
    text = "select from prose\n```python\nselect = 1\n```"
    assert normalize_markdown(text) == text


def test_classify_lines_marks_fences_and_sql():
    lines = ["intro", "```sql", "select 1", "```", "outro"]
    assert classify_lines(lines) == [
        Region.PROSE, Region.FENCE, Region.SQL, Region.FENCE, Region.PROSE,
    ]


@pytest.mark.parametrize("text", [
    "|a|b|\n|1|2|\n|3|4|",
    "Intro\n```sql\nselect * from t\n|x|y|\n```Done.\n| h |\n| v |",
    "```mysql\ninsert into t values ('a')\n```",
    '```js\nconst f = "```";\nf + "x"```\nafter',
    "",
])
def test_normalize_is_idempotent(text):
    once = normalize_markdown(text)
    assert normalize_markdown(once) == once
