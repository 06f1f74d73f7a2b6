"""Tests for the XML quiz loader."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from quiz_engine.loaders import (
    EmptyQuiz,
    LoadErrorKind,
    MalformedContent,
    MarkupQuizLoader,
    SourceUnavailable,
    directory_reader,
    parse_markup_quiz,
)
from quiz_engine.models import Question, Quiz


def _document(*blocks: str, title: str | None = "Sample") -> str:
    root = f'<quiz title="{title}">' if title is not None else "<quiz>"
    return root + "".join(blocks) + "</quiz>"


def _block(text: str, options: list[str], correct: str) -> str:
    option_tags = "".join(f"<option>{option}</option>" for option in options)
    return (
        f"<question><text>{text}</text>{option_tags}"
        f"<correct_answer>{correct}</correct_answer></question>"
    )


def test_arithmetic_document_loads(arithmetic_xml):
    quiz = parse_markup_quiz(arithmetic_xml)

    assert quiz == Quiz(title="T", questions=[Question("2+2?", ["3", "4"], 1)])


@pytest.mark.parametrize("count", [1, 2, 5])
def test_question_blocks_keep_document_order(count):
    blocks = [_block(f"Q{i}", [f"a{i}", f"b{i}", f"c{i}"], str(i % 3)) for i in range(count)]

    quiz = parse_markup_quiz(_document(*blocks))

    assert quiz.total == count
    assert [q.question for q in quiz.questions] == [f"Q{i}" for i in range(count)]
    assert quiz.questions[0].options == ("a0", "b0", "c0")


def test_whitespace_and_declaration_are_tolerated():
    content = """<?xml version="1.0" encoding="utf-8"?>
    <quiz title="Spaced">
        <question>
            <text>
                Which planet is red?
            </text>
            <option> Mars </option>
            <option>Venus</option>
            <correct_answer> 0 </correct_answer>
        </question>
    </quiz>
    """

    quiz = parse_markup_quiz(content)

    assert quiz.questions[0] == Question("Which planet is red?", ["Mars", "Venus"], 0)


def test_missing_title_uses_fallback():
    content = _document(_block("Q", ["a", "b"], "1"), title=None)

    assert parse_markup_quiz(content).title == "Quiz"
    assert parse_markup_quiz(content, fallback_title="Untitled").title == "Untitled"


def test_unknown_tags_are_ignored():
    content = _document(
        "<question><hint>ignore me</hint><text>Q</text><option>a</option>"
        "<option>b</option><difficulty>hard</difficulty><correct_answer>1</correct_answer>"
        "</question>"
    )

    quiz = parse_markup_quiz(content)

    assert quiz.questions[0] == Question("Q", ["a", "b"], 1)


def test_unparsable_correct_answer_defaults_to_first_option():
    content = _document(_block("Q", ["a", "b", "c"], "two"))

    quiz = parse_markup_quiz(content)

    assert quiz.questions[0].correct_index == 0


def test_missing_correct_answer_defaults_to_first_option():
    content = _document("<question><text>Q</text><option>a</option><option>b</option></question>")

    assert parse_markup_quiz(content).questions[0].correct_index == 0


def test_accumulator_resets_between_questions():
    content = _document(
        _block("First", ["a", "b"], "1"),
        "<question><text>Second</text><option>c</option><option>d</option></question>",
    )

    quiz = parse_markup_quiz(content)

    assert quiz.questions[1] == Question("Second", ["c", "d"], 0)


def test_document_without_questions_is_empty():
    with pytest.raises(EmptyQuiz) as excinfo:
        parse_markup_quiz(_document())

    assert excinfo.value.kind is LoadErrorKind.EMPTY_QUIZ


def test_broken_markup_is_malformed():
    with pytest.raises(MalformedContent):
        parse_markup_quiz('<quiz title="T"><question><text>oops</question>')


def test_out_of_range_answer_invalidates_load():
    content = _document(_block("Good", ["a", "b"], "0"), _block("Bad", ["a", "b"], "7"))

    with pytest.raises(MalformedContent, match="question 1"):
        parse_markup_quiz(content)


def test_single_option_question_invalidates_load():
    content = _document("<question><text>Q</text><option>a</option></question>")

    with pytest.raises(MalformedContent, match="question 0"):
        parse_markup_quiz(content)


def test_loader_reads_through_injected_reader(arithmetic_xml):
    requested = []

    def read(name: str) -> str:
        requested.append(name)
        return arithmetic_xml

    loader = MarkupQuizLoader("arith.xml", read)
    quiz = asyncio.run(loader.load())

    assert requested == ["arith.xml"]
    assert quiz.title == "T"


def test_loader_reads_from_directory(tmp_path: Path, arithmetic_xml):
    (tmp_path / "arith.xml").write_text(arithmetic_xml, encoding="utf-8")

    loader = MarkupQuizLoader("arith.xml", directory_reader(tmp_path))

    assert asyncio.run(loader.load()).total == 1


def test_missing_file_is_source_unavailable(tmp_path: Path):
    loader = MarkupQuizLoader("missing.xml", directory_reader(tmp_path))

    with pytest.raises(SourceUnavailable) as excinfo:
        asyncio.run(loader.load())

    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_bundled_geology_quiz_loads():
    quiz = asyncio.run(MarkupQuizLoader("geology1.xml").load())

    assert quiz.title == "Geology Basics"
    assert quiz.total == 4
    assert all(len(question.options) == 4 for question in quiz.questions)


def test_decoded_text_ignores_declared_encoding():
    content = (
        '<?xml version="1.0" encoding="ISO-8859-1"?>'
        + _document(_block("Où?", ["Ici", "Là"], "1"), title="Café")
    )

    quiz = parse_markup_quiz(content)

    assert quiz.title == "Café"
    assert quiz.questions[0] == Question("Où?", ["Ici", "Là"], 1)


def test_loader_keeps_non_ascii_text_from_file(tmp_path: Path):
    content = (
        '<?xml version="1.0" encoding="ISO-8859-1"?>'
        + _document(_block("Größe?", ["klein", "groß"], "1"), title="Café")
    )
    (tmp_path / "accents.xml").write_text(content, encoding="utf-8")

    quiz = asyncio.run(MarkupQuizLoader("accents.xml", directory_reader(tmp_path)).load())

    assert quiz.title == "Café"
    assert quiz.questions[0].options == ("klein", "groß")
