# FILE: tests/test_validation.py
from pairing_core.engine_test_helpers import person, quick_round, quick_state
from pairing_core.models import Lane, Round, SessionState
from pairing_core.validation import validate_history, validate_state


def test_clean_state_has_no_problems():
    state = quick_state([person("a", "l1"), person("b", "out"), person("c")], ["l1"])
    assert validate_state(state) == []


def test_state_problems_are_reported():
    state = SessionState(
        entities=[person("a", "l9"), person("b"), person("b")],
        lanes=[Lane(key="l1"), Lane(key="l1")],
    )
    errs = validate_state(state)
    assert "Duplicate lane keys: l1" in errs
    assert "Duplicate entity keys: b" in errs
    assert any("unknown lane l9" in e for e in errs)


def test_history_keys_must_be_numeric_and_increasing():
    history = [quick_round(1, {}), quick_round(3, {}), quick_round(2, {}), Round(key="x")]
    errs = validate_history(history)
    assert len(errs) == 2
    assert errs[0] == "Round 3: key 2 does not follow 3"
    assert errs[1].startswith("Round 4:")
