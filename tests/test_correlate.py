from pathlib import PurePosixPath

import pytest

from hugin.clone_pair import ClonePair, CodePosition, CodeSlice
from hugin.correlate import (
    EXAMPLE_SIDE,
    PROJECT_SIDE,
    get_clone_pairs,
    path_parts,
    resolve_file_number,
)
from hugin.errors import (
    AmbiguousFileError,
    CorrelationError,
    DuplicatedCodePartError,
    FileNotFoundInResultError,
    InvalidPathError,
)
from hugin.report_parser import (
    CloneSet,
    FileNumber,
    ParsedResult,
    SetElement,
    parse_result,
)


def _element(file_number: tuple[int, int], start: int, end: int) -> SetElement:
    return SetElement(
        file_number=FileNumber(*file_number),
        start_position=CodePosition(start, 0),
        end_position=CodePosition(end, 0),
        extent=10,
    )


def _result(*sets: tuple[SetElement, ...]) -> ParsedResult:
    return ParsedResult(
        file_description={
            FileNumber(0, 0): "/w/src/Blink.ino",
            FileNumber(0, 1): "/w/src/Fade.ino",
            FileNumber(0, 2): "/w/src/Other.ino",
        },
        clone=[CloneSet(elements) for elements in sets],
    )


def test_path_parts() -> None:
    assert path_parts("/a/b/c.ino") == ("a", "b", "c.ino")
    assert path_parts("C:\\w\\src\\c.ino")[-2:] == ("src", "c.ino")
    assert path_parts(PurePosixPath("./src/c.ino")) == ("src", "c.ino")


def test_round_trip_sample_report(sample_report: str) -> None:
    _, result = parse_result(sample_report)
    pairs = get_clone_pairs(result, "MyProject.ino", "Example.ino")
    assert pairs == [
        ClonePair(
            project=CodeSlice(CodePosition(130, 40), CodePosition(141, 4)),
            example_sketch=CodeSlice(CodePosition(20, 40), CodePosition(30, 0)),
        )
    ]
    assert pairs[0].scores is None


def test_one_sided_sets_are_dropped() -> None:
    result = _result(
        (_element((0, 0), 1, 5), _element((0, 2), 7, 11)),
        (_element((0, 0), 20, 25), _element((0, 1), 3, 8)),
    )
    pairs = get_clone_pairs(result, "Blink.ino", "Fade.ino")
    assert len(pairs) == 1
    assert pairs[0].project.start == CodePosition(20, 0)
    assert pairs[0].example_sketch.end == CodePosition(8, 0)


def test_unrelated_elements_are_ignored() -> None:
    result = _result(
        (_element((0, 2), 1, 2), _element((0, 1), 3, 4), _element((0, 0), 5, 6)),
    )
    (pair,) = get_clone_pairs(result, "Blink.ino", "Fade.ino")
    assert pair.project == CodeSlice(CodePosition(5, 0), CodePosition(6, 0))
    assert pair.example_sketch == CodeSlice(CodePosition(3, 0), CodePosition(4, 0))


def test_no_sets_yields_no_pairs() -> None:
    assert get_clone_pairs(_result(), "Blink.ino", "Fade.ino") == []


def test_missing_project_file() -> None:
    with pytest.raises(FileNotFoundInResultError) as exc:
        get_clone_pairs(_result(), "Missing.ino", "Fade.ino")
    assert exc.value.side == PROJECT_SIDE
    assert exc.value.file_name == "Missing.ino"


def test_missing_example_file() -> None:
    with pytest.raises(FileNotFoundInResultError) as exc:
        get_clone_pairs(_result(), "Blink.ino", "Missing.ino")
    assert exc.value.side == EXAMPLE_SIDE
    assert "example" in str(exc.value)


def test_duplicated_project_part() -> None:
    result = _result(
        (_element((0, 0), 1, 5), _element((0, 0), 9, 13), _element((0, 1), 2, 6)),
    )
    with pytest.raises(DuplicatedCodePartError) as exc:
        get_clone_pairs(result, "Blink.ino", "Fade.ino")
    assert exc.value.side == PROJECT_SIDE


def test_duplicated_example_part() -> None:
    result = _result(
        (_element((0, 1), 1, 5), _element((0, 0), 9, 13), _element((0, 1), 2, 6)),
    )
    with pytest.raises(DuplicatedCodePartError) as exc:
        get_clone_pairs(result, "Blink.ino", "Fade.ino")
    assert exc.value.side == EXAMPLE_SIDE
    assert isinstance(exc.value, CorrelationError)


def test_resolve_by_path_suffix() -> None:
    description = {
        FileNumber(0, 0): "/tmp/w/src/Blink.ino",
        FileNumber(0, 1): "/tmp/w/src/example/Blink.ino",
    }
    assert resolve_file_number(description, "src/Blink.ino") == (0, 0)
    assert resolve_file_number(description, "src/example/Blink.ino") == (0, 1)
    assert resolve_file_number(description, PurePosixPath("example/Blink.ino")) == (
        0,
        1,
    )


def test_resolve_ambiguous_basename() -> None:
    description = {
        FileNumber(0, 0): "/tmp/w/src/Blink.ino",
        FileNumber(0, 1): "/tmp/w/src/example/Blink.ino",
    }
    with pytest.raises(AmbiguousFileError) as exc:
        resolve_file_number(description, "Blink.ino", side=EXAMPLE_SIDE)
    assert exc.value.side == EXAMPLE_SIDE
    assert sorted(exc.value.candidates) == sorted(description.values())


def test_resolve_does_not_match_partial_component() -> None:
    description = {FileNumber(0, 0): "/w/src/MyBlink.ino"}
    with pytest.raises(FileNotFoundInResultError):
        resolve_file_number(description, "Blink.ino")


def test_resolve_windows_separators() -> None:
    description = {FileNumber(1, 4): "C:\\w\\src\\Blink.ino"}
    assert resolve_file_number(description, "src/Blink.ino") == (1, 4)


def test_resolve_rejects_empty_target() -> None:
    with pytest.raises(InvalidPathError):
        resolve_file_number({FileNumber(0, 0): "/a.ino"}, "")


def test_same_entry_for_both_sides() -> None:
    with pytest.raises(CorrelationError, match="same result entry"):
        get_clone_pairs(_result(), "Blink.ino", "src/Blink.ino")
