from __future__ import annotations

from datamanager._describe import describe, describe_all


def test_describe_truncates_long_reprs() -> None:
    rendered = describe("x" * 600, max_length=10)

    assert rendered.startswith("'" + "x" * 9)
    assert rendered.endswith("<truncated>")


def test_describe_zero_disables_truncation() -> None:
    assert describe("x" * 600, max_length=0) == repr("x" * 600)


def test_describe_survives_broken_repr() -> None:
    class _Broken:
        def __repr__(self) -> str:
            raise RuntimeError("no repr")

    assert describe(_Broken()).startswith("<_Broken at 0x")


def test_describe_all() -> None:
    assert describe_all([1, "a"]) == "[1, 'a']"
