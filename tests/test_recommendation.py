# FILE: tests/test_recommendation.py
from pairing_core.constants import NEW_LANE, SOLO
from pairing_core.enumerator import AssignmentEnumerator
from pairing_core.engine_test_helpers import apply_moves, person, quick_round, quick_state, track
from pairing_core.models import Move
from pairing_core.moves import get_moves, lane_occupants
from pairing_core.recommendation import (
    calculate_moves_to_best_assignment, calculate_moves_to_best_pairing, lanes_to_tracks,
    pairing_scores, score_assignment, total_score,
)
from pairing_core.scoring import track_score_ledger


def _pairs(moves):
    return {frozenset(m.entities) for m in moves}


def test_empty_history_pairs_everyone_into_the_empty_lanes():
    state = quick_state([person(k) for k in "abcd"], ["l1", "l2"])
    moves = calculate_moves_to_best_pairing(state, [])
    assert len(moves) == 2
    assert sorted(k for m in moves for k in m.entities) == list("abcd")
    assert sorted(m.lane for m in moves) == ["l1", "l2"]
    assert all(len(m.entities) == 2 for m in moves)


def test_recent_pairing_is_not_repeated():
    state = quick_state([person(k) for k in "abcd"], ["l1", "l2"])
    history = [quick_round(1, {"x": ["a", "b"]})]
    moves = calculate_moves_to_best_pairing(state, history)
    pairs = _pairs(moves)
    assert frozenset("ab") not in pairs
    assert pairs in ({frozenset("ac"), frozenset("bd")}, {frozenset("ad"), frozenset("bc")})


def test_odd_population_gets_one_solo():
    state = quick_state([person(k) for k in "abcde"], ["l1", "l2"])
    moves = calculate_moves_to_best_pairing(state, [])
    assert sorted(len(m.entities) for m in moves) == [1, 2, 2]
    assert sorted(k for m in moves for k in m.entities) == list("abcde")
    assert all(SOLO not in m.entities for m in moves)
    assert sorted(m.lane for m in moves) == sorted(["l1", "l2", NEW_LANE])


def test_avoided_pairing_loses_to_alternatives():
    state = quick_state(
        [person("a", avoid=["x"]), person("b", tags=["x"]), person("c"), person("d")],
        ["l1", "l2"],
    )
    moves = calculate_moves_to_best_pairing(state, [])
    assert frozenset("ab") not in _pairs(moves)


def test_too_many_lanes_is_infeasible_not_empty():
    state = quick_state([person("a"), person("b")], ["l1", "l2", "l3"])
    assert calculate_moves_to_best_pairing(state, []) is None


def test_no_people_means_no_moves():
    state = quick_state([track("t")], [])
    assert calculate_moves_to_best_pairing(state, []) == []


def test_locked_lanes_never_appear_in_moves():
    state = quick_state(
        [person("p", "locked"), person("q", "locked")] + [person(k) for k in "abcd"],
        ["locked", "l1", "l2"], locked=["locked"],
    )
    moves = calculate_moves_to_best_pairing(state, [quick_round(1, {"locked": ["p", "q"]})])
    assert all(m.lane != "locked" for m in moves)
    assert not {"p", "q"} & {k for m in moves for k in m.entities}


def test_solo_groups_score_minus_one():
    state = quick_state([person("a"), person("b"), person("c")], ["l1", "l2"])
    keys, scores = pairing_scores(state, [])
    index = {k: i for i, k in enumerate(keys)}
    assert score_assignment(("a",), "l1", scores, index, {}, {}) == -1
    assert score_assignment(("a", "b"), "l1", scores, index, {}, {}) == 1


def test_tracks_steer_pairs_away_from_recent_tracks():
    state = quick_state(
        [person(k) for k in "abcd"] + [track("t1", "l1"), track("t2", "l2")],
        ["l1", "l2"],
    )
    history = [quick_round(1, {"x": ["a"]}, {"x": ["t1"]})]
    moves = calculate_moves_to_best_pairing(state, history)
    lane_of = {k: m.lane for m in moves for k in m.entities}
    assert lane_of["a"] == "l2"


def test_best_pairing_matches_brute_force():
    state = quick_state(
        [person("a", "l1"), person("b", "l1"), person("c", "l2"), person("d"), person("e"),
         track("t", "l2")],
        ["l1", "l2", "l3"],
    )
    history = [
        quick_round(1, {"x": ["a", "d"], "y": ["b", "c"]}, {"y": ["t"]}),
        quick_round(2, {"x": ["a", "b"], "y": ["c", "e"]}),
        quick_round(3, {"x": ["b", "d"], "y": ["e"]}, {"x": ["t"]}),
    ]
    keys, scores = pairing_scores(state, history)
    index = {k: i for i, k in enumerate(keys)}
    tracks = lanes_to_tracks(state)
    ledger = track_score_ledger(state, history)

    candidates = list(AssignmentEnumerator(state))
    totals = [total_score(a, scores, index, tracks, ledger) for a in candidates]
    best = candidates[totals.index(max(totals))]

    expected = get_moves([(g.people, g.lane) for g in best], lane_occupants(state))
    assert calculate_moves_to_best_pairing(state, history) == expected


def test_recommending_twice_is_idempotent():
    state = quick_state([person(k) for k in "abcd"], ["l1", "l2"])
    history = [quick_round(1, {"x": ["a", "b"], "y": ["c", "d"]})]
    first = calculate_moves_to_best_pairing(state, history)
    assert first
    second = calculate_moves_to_best_pairing(apply_moves(state, first), history)
    assert second == []


def test_people_already_in_place_do_not_move():
    state = quick_state(
        [person("a", "l1"), person("b", "l1"), person("c", "l2"), person("d", "l2")],
        ["l1", "l2"],
    )
    history = [quick_round(1, {"x": ["a", "b"], "y": ["c", "d"]})]
    moves = calculate_moves_to_best_pairing(state, history)
    # a and c stay as anchors, their partners swap
    assert moves == [Move(lane="l1", entities=["d"]), Move(lane="l2", entities=["b"])]


def test_tracks_are_placed_away_from_their_recent_people():
    state = quick_state(
        [person("a", "l1"), person("b", "l1"), person("c", "l2"), person("d", "l2"),
         track("t1", "l1"), track("t2", "l2")],
        ["l1", "l2"],
    )
    history = [quick_round(1, {"x": ["a", "b"]}, {"x": ["t1"]})]
    moves = calculate_moves_to_best_assignment("person", "track", state, history)
    assert moves == [Move(lane="l1", entities=["t2"]), Move(lane="l2", entities=["t1"])]


def test_more_tracks_than_lanes_cycle_over_the_lanes():
    state = quick_state(
        [person("a", "l1"), person("b", "l1"), track("t1"), track("t2")],
        ["l1"],
    )
    moves = calculate_moves_to_best_assignment("person", "track", state, [])
    assert sorted(m.entities[0] for m in moves) == ["t1", "t2"]
    assert all(m.lane == "l1" for m in moves)


def test_assignment_without_left_entities_is_empty():
    state = quick_state([person("a"), track("t1")], ["l1"])
    assert calculate_moves_to_best_assignment("person", "track", state, []) == []


def test_fewer_tracks_than_lanes_leave_a_lane_without_one():
    state = quick_state(
        [person("a", "l1"), person("b", "l1"), person("c", "l2"), person("d", "l2"), track("t1")],
        ["l1", "l2"],
    )
    history = [quick_round(1, {"x": ["a"]}, {"x": ["t1"]})]
    moves = calculate_moves_to_best_assignment("person", "track", state, history)
    assert moves == [Move(lane="l2", entities=["t1"])]
