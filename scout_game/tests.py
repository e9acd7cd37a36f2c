# Tests for the card model, the move validator and scoring.
import random

import pytest

from scout_game.cards import Card, Facing, Hand, build_deck, deal_hands
from scout_game.common import (ActiveSet, PlayerView, Scout, ScoutShow,
                               SetKind, Show, classify, is_flush, is_straight,
                               rank, resolve_move)
from scout_game.errors import (EmptyHand, IllegalShape, IndexOutOfBounds,
                               InsufficientRank, InvalidPlayerCount,
                               InvalidRange, MalformedAction, NoActiveSet,
                               ScoutShowUsed)
from scout_game.scoring import score_round


def cards(*values):
    # Cards showing the given values; the hidden side is value + 1 (9 hides 0).
    return tuple(Card(v, (v + 1) % 10) for v in values)


def hand(*values):
    return Hand(cards(*values))


def table(*values, owner=1):
    return ActiveSet(cards(*values), owner, classify(values))


def make_view(hand_, active_set=None, can_scout_show=True, max_set_length=3):
    return PlayerView(
        num_players=3, current_player=0, hand=hand_, active_set=active_set,
        hand_sizes=(len(hand_), 5, 5), scores=(0, 0, 0),
        can_scout_show=can_scout_show, max_set_length=max_set_length, turn=0)


def test_card():
    c = Card(3, 7)
    assert c.facing is Facing.FRONT
    assert c.value == 3
    assert c.hidden_value == 7
    assert c.flipped().value == 7
    assert c.flipped().facing is Facing.BACK
    assert c.flipped().flipped() == c
    assert c.flipped().identity == c.identity == (3, 7)
    with pytest.raises(ValueError):
        Card(4, 4)
    with pytest.raises(ValueError):
        Card(10, 1)


def test_build_deck():
    assert len(build_deck(3)) == 36
    assert len(build_deck(4)) == 44
    assert len(build_deck(5)) == 45
    for n in (3, 4, 5):
        identities = [c.identity for c in build_deck(n)]
        assert len(set(identities)) == len(identities)
    assert all(9 not in c.identity for c in build_deck(3))
    assert (8, 9) not in [c.identity for c in build_deck(4)]
    with pytest.raises(InvalidPlayerCount):
        build_deck(2)
    with pytest.raises(InvalidPlayerCount):
        build_deck(6)


@pytest.mark.parametrize("num_players,hand_size", [(3, 12), (4, 11), (5, 9)])
def test_deal_hands(num_players, hand_size):
    for seed in range(5):
        hands = deal_hands(num_players, random.Random(seed))
        assert [len(h) for h in hands] == [hand_size] * num_players
        dealt = sorted(c.identity for h in hands for c in h)
        assert dealt == sorted(c.identity for c in build_deck(num_players))
    assert deal_hands(4, random.Random(7)) == deal_hands(4, random.Random(7))


def test_hand_ends():
    h = hand(1, 7, 2)
    card, rest = h.scout_from(True)
    assert card.value == 1
    assert rest.values() == (7, 2)
    card, rest = h.scout_from(False)
    assert card.value == 2
    assert rest.values() == (1, 7)
    assert h.values() == (1, 7, 2)
    with pytest.raises(EmptyHand):
        Hand().scout_from(True)


def test_hand_insert():
    h = hand(1, 7, 2)
    card = Card(9, 4)
    assert h.insert_at(1, card).values() == (1, 9, 7, 2)
    assert h.insert_at(1, card, flip=True).values() == (1, 4, 7, 2)
    assert h.insert_at(3, card).values() == (1, 7, 2, 9)
    assert h.values() == (1, 7, 2)
    with pytest.raises(IndexOutOfBounds):
        h.insert_at(4, card)
    with pytest.raises(IndexOutOfBounds):
        h.insert_at(-1, card)


def test_hand_insert_then_take_back():
    h = hand(4, 0, 6)
    card = Card(2, 8)
    assert h.insert_at(0, card).scout_from(True) == (card, h)
    assert h.insert_at(len(h), card).scout_from(False) == (card, h)


def test_hand_remove_range():
    h = hand(1, 7, 2, 5)
    removed, rest = h.remove_range(1, 2)
    assert [c.value for c in removed] == [7, 2]
    assert rest.values() == (1, 5)
    removed, rest = h.remove_range(3, 3)
    assert rest.values() == (1, 7, 2)
    for start, stop in [(2, 1), (0, 4), (-1, 0), (4, 4)]:
        with pytest.raises(InvalidRange):
            h.remove_range(start, stop)


def test_hand_flip_keeps_order():
    h = Hand([Card(1, 2), Card(5, 3), Card(9, 4)])
    assert h.flipped().values() == (2, 3, 4)
    assert h.flipped().flipped() == h


def test_shapes():
    assert is_flush([])
    assert is_flush([1])
    assert is_flush([1, 1])
    assert not is_flush([1, 2])
    assert not is_flush([1, 1, 2])
    assert is_straight([])
    assert is_straight([1])
    assert is_straight([1, 2])
    assert is_straight([1, 2, 3])
    assert is_straight([3, 2, 1])
    assert not is_straight([1, 1])
    assert not is_straight([1, 3])
    assert not is_straight([1, 2, 4])
    assert not is_straight([1, 2, 1])

    assert classify((3, 3, 3)) is SetKind.FLUSH
    assert classify((4, 5, 6)) is SetKind.STRAIGHT
    assert classify((6, 5, 4)) is SetKind.STRAIGHT
    assert classify((7,)) is SetKind.FLUSH
    assert classify((1, 2, 3, 4), None) is SetKind.STRAIGHT
    for bad in [(1, 3), (1, 2, 2), (), (1, 2, 3, 4)]:
        with pytest.raises(IllegalShape):
            classify(bad, 3)


def test_rank():
    assert rank((3, 3, 3)) == (3, 3)
    assert rank((5, 6)) == (2, 6)
    assert rank((6, 5)) == rank((5, 6))
    assert rank((9,)) < rank((0, 1)) < rank((0, 0, 0))


def test_show_on_empty_table():
    res = resolve_move(hand(3, 3, 3), None, Show(0, 2), player=0)
    assert res.active_set.kind is SetKind.FLUSH
    assert res.active_set.owner == 0
    assert res.active_set.rank() == (3, 3)
    assert not res.hand
    assert res.discarded == ()


def test_show_must_beat_table():
    flush = resolve_move(hand(3, 3, 3), None, Show(0, 2), player=0).active_set
    # (2, 6) does not beat (3, 3).
    with pytest.raises(InsufficientRank):
        resolve_move(hand(5, 6), flush, Show(0, 1), player=1)

    t = table(4, 5)
    res = resolve_move(hand(5, 6, 9), t, Show(0, 1), player=0)
    assert res.active_set.values() == (5, 6)
    assert res.discarded == t.cards
    assert res.hand.values() == (9,)
    with pytest.raises(InsufficientRank):
        resolve_move(hand(5, 6, 9), t, Show(2, 2), player=0)
    # Ties don't beat the table.
    with pytest.raises(InsufficientRank):
        resolve_move(hand(5, 5), t, Show(0, 1), player=0)
    with pytest.raises(IllegalShape):
        resolve_move(hand(1, 3), t, Show(0, 1), player=0)
    with pytest.raises(InvalidRange):
        resolve_move(hand(1, 3), t, Show(0, 5), player=0)


def test_show_length_cap():
    with pytest.raises(IllegalShape):
        resolve_move(hand(1, 2, 3, 4), table(4, 5), Show(0, 3), 0, max_set_length=3)
    res = resolve_move(hand(1, 2, 3, 4), table(4, 5), Show(0, 3), 0, max_set_length=None)
    assert res.active_set.rank() == (4, 4)


def test_scout():
    res = resolve_move(hand(1, 7, 2), table(9, owner=2), Scout(True, False, 1), player=0)
    assert res.hand.values() == (1, 9, 7, 2)
    assert res.active_set is None
    assert res.scouted.value == 9

    t = table(4, 5, 6)
    res = resolve_move(hand(1), t, Scout(False, False, 0), player=0)
    assert res.hand.values() == (6, 1)
    assert res.active_set.values() == (4, 5)
    assert res.active_set.owner == 1
    assert res.active_set.kind is SetKind.STRAIGHT
    res = resolve_move(hand(1), t, Scout(False, True, 1), player=0)
    assert res.hand.values() == (1, 7)

    assert resolve_move(hand(1), t, Scout(True, False, 1), 0).hand.values() == (1, 4)
    with pytest.raises(IndexOutOfBounds):
        resolve_move(hand(1), t, Scout(True, False, 2), player=0)
    with pytest.raises(NoActiveSet):
        resolve_move(hand(1), None, Scout(True, False, 0), player=0)


def test_malformed_actions():
    t = table(4, 5)
    for bad in [Scout(1, False, 0), Scout(True, False, True), Show("0", "1"),
                Show(0.0, 1), ScoutShow(Show(0, 0), Show(0, 0)), "scout", None]:
        with pytest.raises(MalformedAction):
            resolve_move(hand(1, 2), t, bad, player=0)


def test_scout_show():
    t = table(2, 3, 4)
    h = hand(3, 5, 6)
    # Scout the 4 between 3 and 5: 3,4,5 beats 2,3.
    res = resolve_move(h, t, ScoutShow(Scout(False, False, 1), Show(0, 2)), 0)
    assert res.hand.values() == (6,)
    assert res.active_set.values() == (3, 4, 5)
    assert [c.value for c in res.discarded] == [2, 3]
    assert res.scouted.value == 4
    # 4,5 beats 2,3.
    assert resolve_move(h, t, ScoutShow(Scout(False, False, 1), Show(1, 2)), 0)
    # 3,4,5,6 is too long.
    with pytest.raises(IllegalShape):
        resolve_move(h, t, ScoutShow(Scout(False, False, 1), Show(0, 3)), 0)
    # Scouting the 2 leaves 3,4 on the table, which beats 2,3...
    with pytest.raises(InsufficientRank):
        resolve_move(h, t, ScoutShow(Scout(True, False, 0), Show(0, 1)), 0)
    # ...but not 5,6.
    assert resolve_move(h, t, ScoutShow(Scout(True, False, 0), Show(2, 3)), 0)
    # The 4 flipped is a 5: 5,5 beats 2,3.
    res = resolve_move(h, t, ScoutShow(Scout(False, True, 1), Show(1, 2)), 0)
    assert res.active_set.values() == (5, 5)
    # Scouting the 4 between 5 and 6: illegal to play 5,4,6.
    with pytest.raises(IllegalShape):
        resolve_move(h, t, ScoutShow(Scout(False, False, 2), Show(1, 3)), 0)
    with pytest.raises(ScoutShowUsed):
        resolve_move(h, t, ScoutShow(Scout(False, False, 1), Show(0, 2)), 0,
                     can_scout_show=False)
    with pytest.raises(NoActiveSet):
        resolve_move(h, None, ScoutShow(Scout(False, False, 1), Show(0, 2)), 0)


def test_possible_moves():
    # 2 cards in hand, none on table -> only Shows.
    view = make_view(hand(4, 5))
    assert view.possible_moves() == [Show(0, 0), Show(0, 1), Show(1, 1)]

    # 2 cards in hand, 1 on table -> 6 Scouts, 3 Shows (4, 5, (4,5)).
    # Scout & Shows: the table is empty after the scout, so it's every set in
    # the 3-card hand. Scouting the 3 gives 6 + 4 + 4 of them depending on
    # where it goes (3,4,5 / 4,3,5 / 4,5,3), the 4 (flipped) gives 5 + 5 + 5.
    view = make_view(hand(4, 5), table(3))
    moves = view.possible_moves()
    assert 6 == len([m for m in moves if isinstance(m, Scout)])
    assert 3 == len([m for m in moves if isinstance(m, Show)])
    assert 29 == len([m for m in moves if isinstance(m, ScoutShow)])
    assert all(view.is_valid(m) for m in moves)

    view = make_view(hand(4, 5), table(3), can_scout_show=False)
    assert not [m for m in view.possible_moves() if isinstance(m, ScoutShow)]


def test_legal_moves_match_resolve():
    view = make_view(hand(4, 5, 5, 1), table(2, 3))
    moves = view.legal_moves()
    assert [m for (m, _) in moves] == view.possible_moves()
    assert any(isinstance(m, ScoutShow) for (m, _) in moves)
    for move, res in moves:
        assert res == view.resolve(move)


def test_hand_after():
    view = make_view(hand(1, 7, 2), table(9, owner=2))
    assert view.hand_after(Scout(True, False, 1)).values() == (1, 9, 7, 2)
    assert view.hand == hand(1, 7, 2)


def test_score_round():
    hands = [Hand(), hand(1, 2), hand(3, 4, 5)]
    scores = score_round(hands, table(6, 6, owner=0), [1, 0, 2], winner_bonus=3)
    assert scores == [3 + 1 + 2, -2, -3 + 2]

    # Without tokens, everybody but the winner loses their hand size.
    scores = score_round(hands, table(6, owner=0), [0, 0, 0], winner_bonus=5)
    assert scores == [6, -2, -3]

    assert score_round(hands, None, [0, 0, 0], winner_bonus=0) == [0, -2, -3]
    with pytest.raises(ValueError):
        score_round(hands, None, [0, 0])
