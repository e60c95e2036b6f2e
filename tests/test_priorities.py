import pytest

from core.priorities import normalize_priority, priority_label, priority_rank


@pytest.mark.parametrize(
    "value, expected",
    [(None, "medium"), ("HIGH", "high"), (" low ", "low"), (1, "low"), (3, "high")],
)
def test_normalize_priority(value, expected):
    assert normalize_priority(value) == expected


@pytest.mark.parametrize("value", ["urgent", 0, 4, True])
def test_normalize_priority_rejects(value):
    with pytest.raises(ValueError):
        normalize_priority(value)


def test_rank_and_label():
    assert priority_rank("low") < priority_rank("medium") < priority_rank("high")
    assert priority_rank("bogus") == priority_rank("medium")
    assert priority_label("high") == "High priority"
    assert priority_label("low", short=True) == "Low"
