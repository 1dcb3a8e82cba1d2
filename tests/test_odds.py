import functools

import pytest

from engine.cards import HOLE_CARDS_PER_PLAYER
from engine.deck import Deck
from engine.evaluator import HandType
from engine.models import Outcome
from engine.odds import (
    HandOdds,
    HandOutcome,
    Odds,
    ScenarioPlan,
    _run_chunk,
    classify_outcomes,
    plan_chunks,
    resolve_outcomes,
    simulate_odds,
)
from engine.permutations import SeededStreams

from .helpers import cards, hand


def _outcomes(hands):
    return [result.outcome for result in classify_outcomes(hands)]


def test_strict_ordering_has_one_winner():
    results = _outcomes([hand("As Ad Kc Qs 9h"), hand("Ks Kd Qc Js 9d"), hand("As Kd Jh 9c 4d")])
    assert results.count(Outcome.WIN) == 1
    assert results.count(Outcome.TIE) == 0
    assert results.count(Outcome.LOSS) == 2
    assert results[0] == Outcome.WIN


def test_equal_hands_below_the_maximum_still_lose():
    results = _outcomes([hand("As Td 8d 6d 4d"), hand("Ac Th 8h 6h 4s"), hand("Ks Kd Qc Js 9d")])
    assert results == [Outcome.LOSS, Outcome.LOSS, Outcome.WIN]


def test_tied_top_hands_split_and_others_lose():
    results = _outcomes([hand("As Ad Kc Qs 9h"), hand("Ah Ac Kd Qd 9s"), hand("Ks Kd Qc Js 9d")])
    assert results == [Outcome.TIE, Outcome.TIE, Outcome.LOSS]


def test_three_way_tie():
    results = _outcomes([hand("As 8d 6d 4d 2d"), hand("Ac 8c 6c 4c 2s"), hand("Ah 8h 6h 4s 2c")])
    assert results == [Outcome.TIE] * 3


def test_single_hand_wins():
    assert _outcomes([hand("As 2d 4h 6c 8s")]) == [Outcome.WIN]


def test_classifier_keeps_positions():
    hands = [hand("Ks Kd Qc Js 9d"), hand("As Ad Kc Qs 9h")]
    results = classify_outcomes(hands)
    assert [result.hand for result in results] == hands
    assert [result.outcome for result in results] == [Outcome.LOSS, Outcome.WIN]


def test_classifier_rejects_empty_table():
    with pytest.raises(ValueError, match="At least one hand"):
        classify_outcomes([])


def test_higher_kicker_wins_on_shared_board():
    results = resolve_outcomes([cards("As Kd"), cards("Ac Qd")], cards("Th 8h 6h 4h 2c"))
    assert [result.outcome for result in results] == [Outcome.WIN, Outcome.LOSS]


def test_better_flush_wins():
    results = resolve_outcomes([cards("8s 6h"), cards("7s 6c")], cards("As Ks Qs Js 5s"))
    assert [result.outcome for result in results] == [Outcome.WIN, Outcome.LOSS]
    assert results[0].hand.hand_type == HandType.FLUSH


def _seat_odds(seat, wins=0, ties=0, losses=0, hand_types=None):
    return HandOdds(seats=frozenset((seat,)), wins=wins, ties=ties, losses=losses, hand_types=dict(hand_types or {}))


def test_hand_odds_update_and_percentages():
    odds = HandOdds.for_seat(1)
    assert odds.win_percent == 0.0
    odds.update(HandOutcome(hand("As Ad Kc Qs 9h"), Outcome.WIN))
    odds.update(HandOutcome(hand("As Ad Kc Qs 9h"), Outcome.WIN))
    odds.update(HandOutcome(hand("As Kd Jh 9c 4d"), Outcome.TIE))
    odds.update(HandOutcome(hand("As Kd Jh 9c 4d"), Outcome.LOSS), count=2)

    assert (odds.wins, odds.ties, odds.losses) == (2, 1, 2)
    assert odds.total == 5
    assert odds.win_percent == pytest.approx(40.0)
    assert odds.tie_percent == pytest.approx(20.0)
    assert odds.loss_percent == pytest.approx(40.0)
    assert odds.frequency_of(HandType.PAIR) == 2
    assert odds.frequency_of(HandType.HIGH_CARD) == 3
    assert odds.distribution() == [(HandType.HIGH_CARD, 60.0), (HandType.PAIR, 40.0)]


def test_distribution_breaks_count_ties_by_stronger_hand():
    odds = _seat_odds(1, wins=4, hand_types={HandType.PAIR: 2, HandType.FLUSH: 2})
    assert [hand_type for hand_type, _ in odds.distribution()] == [HandType.FLUSH, HandType.PAIR]


def test_merge_is_associative_and_commutative():
    a = _seat_odds(1, wins=3, ties=1, losses=2, hand_types={HandType.PAIR: 4, HandType.FLUSH: 2})
    b = _seat_odds(1, wins=1, losses=5, hand_types={HandType.HIGH_CARD: 6})
    c = _seat_odds(1, ties=2, losses=1, hand_types={HandType.PAIR: 1, HandType.STRAIGHT: 2})

    left = a.merge(b).merge(c)
    right = a.merge(b.merge(c))
    shuffled = c.merge(a).merge(b)
    assert left == right == shuffled
    assert (left.wins, left.ties, left.losses) == (4, 3, 8)
    assert left.hand_types == {
        HandType.PAIR: 5,
        HandType.FLUSH: 2,
        HandType.HIGH_CARD: 6,
        HandType.STRAIGHT: 2,
    }
    assert left.seat == 1
    assert not left.is_field


def test_merging_seats_builds_a_field():
    field = _seat_odds(2, wins=1).merge(_seat_odds(3, losses=1))
    assert field.is_field
    assert field.seat is None
    assert field.seats == frozenset({2, 3})


def test_merge_unknown_players_collapses_opponents():
    odds = Odds.empty(4)
    odds.players[1].wins = 3
    odds.players[2].ties = 2
    odds.players[3].losses = 5

    merged = odds.merge_unknown_players(1)
    assert len(merged) == 2
    assert merged[0].seat == 1
    assert merged[1].seats == frozenset({2, 3, 4})
    assert (merged[1].wins, merged[1].ties, merged[1].losses) == (3, 2, 5)

    assert len(odds.merge_unknown_players(3)) == 4


def test_odds_merge_requires_same_table():
    with pytest.raises(ValueError, match="different tables"):
        Odds.empty(2).merge(Odds.empty(3))


def test_plan_chunks_covers_every_sample():
    assert plan_chunks(25, 10) == [(0, 10), (1, 10), (2, 5)]
    assert plan_chunks(0, 10) == []
    with pytest.raises(ValueError):
        plan_chunks(10, 0)


def test_folded_seats_consume_cards_without_contesting():
    plan = ScenarioPlan(
        players=(tuple(cards("As Kd")),),
        board=(),
        remaining=(),
        opponents=1,
        folded=1,
    )
    assert plan.unknown_cards == 2 * HOLE_CARDS_PER_PLAYER + 5
    assert plan.contestants == 2
    # Folded pair first (aces), then the opponent, then the board.
    scenario = cards("Ac Ah 7h 6c Ks Qd 9c 4s 3h")
    results = plan.play_scenario(scenario)
    assert [result.outcome for result in results] == [Outcome.WIN, Outcome.LOSS]
    assert results[1].hand.hand_type == HandType.HIGH_CARD


def test_simulate_counts_one_result_per_sample_per_seat():
    players = [cards("As Ah"), cards("7c 2d")]
    deck = Deck.without([card for hole in players for card in hole])
    odds = simulate_odds(0, 0, players, [], deck, 3_000, SeededStreams(3), workers=1, chunk_size=1_000)

    assert len(odds) == 2
    first, second = odds
    assert first.total == second.total == 3_000
    assert first.wins == second.losses
    assert first.ties == second.ties
    assert sum(first.hand_types.values()) == 3_000


def test_simulate_is_independent_of_partition_and_workers():
    players = [cards("Ks Qs")]
    board = cards("Js Ts 2d")
    deck = Deck.without([*players[0], *board])
    streams = SeededStreams(11)

    serial = simulate_odds(2, 1, players, board, deck, 2_000, streams, workers=1, chunk_size=500)
    parallel = simulate_odds(2, 1, players, board, deck, 2_000, streams, workers=2, chunk_size=500)
    assert serial == parallel

    plan = ScenarioPlan(
        players=tuple(tuple(hole) for hole in players),
        board=tuple(board),
        remaining=deck.cards(),
        opponents=2,
        folded=1,
    )
    partials = [_run_chunk(plan, chunk, streams) for chunk in plan_chunks(2_000, 500)]
    reversed_merge = functools.reduce(Odds.merge, reversed(partials), Odds.empty(3))
    assert reversed_merge == serial


def test_simulate_without_unknown_cards_scores_one_showdown():
    players = [cards("As Kd"), cards("7h 7c")]
    board = cards("2s 3h 4c 5d 6s")
    deck = Deck.without([card for hole in players for card in hole] + board)
    odds = simulate_odds(0, 0, players, board, deck, 10, SeededStreams(1))
    assert (odds[0].wins, odds[0].losses) == (0, 10)
    assert (odds[1].wins, odds[1].losses) == (10, 0)
    assert odds[1].frequency_of(HandType.STRAIGHT) == 10


def test_simulate_rejects_impossible_requests():
    players = [cards("As Ad")]
    short_deck = cards("2c 3c 4c 5c 6c 7c 8c 9c Tc Jc")
    with pytest.raises(ValueError, match="Need 15 unknown cards"):
        simulate_odds(3, 2, players, [], short_deck, 10, SeededStreams(1))
    with pytest.raises(ValueError, match="negative"):
        simulate_odds(-1, 0, players, [], short_deck, 10, SeededStreams(1))
    with pytest.raises(ValueError, match="At least one contestant"):
        simulate_odds(0, 0, [], [], short_deck, 10, SeededStreams(1))


def test_pocket_aces_heads_up_wins_about_85_percent():
    players = [cards("As Ah")]
    deck = Deck.without(players[0])
    odds = simulate_odds(1, 0, players, [], deck, 20_000, SeededStreams(7), workers=1)
    assert 83.0 <= odds[0].win_percent <= 87.0


@pytest.mark.slow
def test_pocket_aces_heads_up_converges_with_a_million_samples():
    players = [cards("As Ah")]
    deck = Deck.without(players[0])
    for seed in (1, 2, 3):
        odds = simulate_odds(1, 0, players, [], deck, 1_000_000, SeededStreams(seed), workers=None)
        assert 84.0 <= odds[0].win_percent <= 86.0, f"seed={seed} win={odds[0].win_percent:.2f}%"
