"""Tests for prompt building."""

from vault_llm.config.assistant import Mode
from vault_llm.prompts.builder import (
    CREATE_TEMPLATE,
    QUERY_TEMPLATE,
    build_prompt,
    build_title_prompt,
)


def test_query_with_context():
    prompt = build_prompt(Mode.QUERY, True, "What is X?", "FILE: a.md\n\nX is 1\n\n", "a.md")

    assert "User's Notes:\nFILE: a.md\n\nX is 1\n\n" in prompt
    assert "Current file: a.md" in prompt
    assert prompt.endswith("User's Question: What is X?")
    assert "[[file_path]]" in prompt
    assert "[[file_path#section_title]]" in prompt


def test_query_without_current_file():
    prompt = build_prompt("query", True, "What is X?", "ctx")
    assert "Current file:" not in prompt


def test_query_without_context_ignores_context():
    prompt = build_prompt(Mode.QUERY, False, "What is X?", "secret context", "a.md")
    assert prompt == QUERY_TEMPLATE.format(query="What is X?")
    assert "secret context" not in prompt


def test_create_without_context():
    assert build_prompt(Mode.CREATE, False, "Black holes") == CREATE_TEMPLATE.format(query="Black holes")


def test_create_with_context():
    prompt = build_prompt(Mode.CREATE, True, "Black holes", "FILE: space.md\n\nStars\n\n")

    assert "Topic to create a note about: Black holes" in prompt
    assert "FILE: space.md" in prompt
    assert "DO NOT include ```md" in prompt
    assert "[[file_path#title_of_the_section_you_are_referencing]]" in prompt


def test_title_prompt_truncates_response():
    prompt = build_title_prompt("Why?", "x" * 600)

    assert "Question: Why?" in prompt
    assert "x" * 500 + "... (truncated for brevity)" in prompt
    assert "x" * 501 not in prompt
