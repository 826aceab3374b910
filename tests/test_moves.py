# FILE: tests/test_moves.py
from pairing_core.constants import NEW_LANE
from pairing_core.engine_test_helpers import person, quick_state, track
from pairing_core.models import Move
from pairing_core.moves import get_moves, lane_occupants, match_lanes


def test_lane_occupants_only_count_unlocked_lanes_and_the_given_type():
    state = quick_state(
        [person("a", "l1"), person("b", "l2"), person("c"), track("t", "l1")],
        ["l1", "l2", "l3"], locked=["l2"],
    )
    assert lane_occupants(state) == {"l1": ["a"], "l3": []}
    assert lane_occupants(state, "track") == {"l1": ["t"], "l3": []}


def test_get_moves_skips_people_already_in_their_lane():
    moves = get_moves([(("a", "b"), "l1")], {"l1": ["a", "c"]})
    assert moves == [Move(lane="l1", entities=["b"])]


def test_get_moves_moves_everyone_into_new_and_empty_lanes():
    moves = get_moves([(("a", "b"), NEW_LANE), (("c",), "l2")], {"l2": []})
    assert moves == [Move(lane="new-lane", entities=["a", "b"]), Move(lane="l2", entities=["c"])]


def test_get_moves_without_a_match_is_empty():
    assert get_moves(None, {"l1": ["a"]}) == []
    assert get_moves([(("a", "b"), "l1")], {"l1": ["a", "b"]}) == []


def test_match_lanes_keeps_an_occupant_in_each_lane():
    layouts = match_lanes([("a", "b"), ("c", "d")], {"l1": ["a"], "l2": []})
    assert layouts == [[(("a", "b"), "l1"), (("c", "d"), "l2")]]


def test_match_lanes_edge_cases():
    assert match_lanes([], {"l1": []}) == [[]]
    assert match_lanes([("a", "b")], {}) == [[]]
    assert match_lanes([("a", "b")], {"l1": [], "l2": []}) is None
    assert match_lanes([("a", "b")], {"l1": ["x"]}) is None
