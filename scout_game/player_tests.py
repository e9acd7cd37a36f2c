# Tests for the strategies and the game loop.
import io
import logging
import random

import pytest

from scout_game.cards import Card, Hand
from scout_game.common import (ActiveSet, PlayerView, Quit, Scout, ScoutShow,
                               Show, Strategy, classify)
from scout_game.config import GameConfig
from scout_game.errors import (GameHalted, InvalidPlayerCount, InvalidRange,
                               MalformedAction)
from scout_game.game_state import GameResult, Phase
from scout_game.main import main, run, watch
from scout_game.players import (InteractivePlayer, RandomPlayer, RushPlayer,
                                parse_action, turns_to_empty)

# Stop runaway games from hanging the suite.
CONFIG = GameConfig(max_turns=1000)


def hand(*values):
    return Hand(Card(v, (v + 1) % 10) for v in values)


def table(*values, owner=1):
    return ActiveSet(hand(*values).cards, owner, classify(values))


def make_view(hand_, active_set=None, can_scout_show=True):
    return PlayerView(
        num_players=3, current_player=0, hand=hand_, active_set=active_set,
        hand_sizes=(len(hand_), 5, 5), scores=(0, 0, 0),
        can_scout_show=can_scout_show, max_set_length=3, turn=0)


class Scripted(Strategy):
    # Plays the given actions in order and remembers what got rejected.
    def __init__(self, actions):
        self.actions = list(actions)
        self.rejected = []

    def decide(self, view):
        return self.actions.pop(0)

    def notify_invalid(self, view, error):
        self.rejected.append(error)


def test_turns_to_empty():
    cache = {}
    assert turns_to_empty([], 3, cache) == 0
    assert turns_to_empty([0], 3, cache) == 1
    assert turns_to_empty([0, 1, 2], 3, cache) == 1
    assert turns_to_empty([0, 1, 0], 3, cache) == 2
    assert turns_to_empty([1, 3, 5], 3, cache) == 3
    assert turns_to_empty([1, 3, 1], 3, cache) == 2
    assert turns_to_empty([1, 3, 3, 1], 3, cache) == 2
    assert turns_to_empty([1, 3, 5, 7, 1], 3, cache) == 4
    assert turns_to_empty([5, 5, 5, 5], 3, cache) == 2
    assert turns_to_empty([1, 2, 3, 4], 3) == 2
    assert turns_to_empty([1, 2, 3, 4], None) == 1


def test_rush_goes_out_when_it_can():
    assert RushPlayer().decide(make_view(hand(3, 3, 3))) == Show(0, 2)


def test_rush_prefers_show_to_scout_show():
    # Both the Show and a Scout & Show empty the hand; the plain Show wins.
    view = make_view(hand(5), table(4))
    assert view.is_valid(ScoutShow(Scout(True, False, 0), Show(0, 1)))
    assert RushPlayer().decide(view) == Show(0, 0)


def test_rush_scouts_when_it_cannot_show():
    # A lone 1 can't beat 8,9. Scouting the 9 flipped (a 0) next to the 1
    # leaves a hand that goes out in one Show.
    view = make_view(hand(1), table(8, 9), can_scout_show=False)
    assert not [m for m in view.possible_moves() if not isinstance(m, Scout)]
    move = RushPlayer().decide(view)
    assert move == Scout(left=False, flip=True, index=0)
    assert RushPlayer().decide(view) == move


def test_rush_picks_show_leaving_fewest_turns():
    # Nothing goes out this turn. Playing 1,2,3 or 7,7 leaves one more Show;
    # the bigger set wins the tie. A lone card would leave two.
    view = make_view(hand(1, 2, 3, 7, 7))
    assert RushPlayer().decide(view) == Show(0, 2)
    assert turns_to_empty(view.hand_after(Show(0, 0)).values(), 3) == 2


def test_rush_scout_shows_when_no_show_beats_the_table():
    # The 1 can't beat 8,9 on its own. Scouting the 9 flipped (a 0) in front
    # of the 1 makes the straight 0,1, which beats the 8 left on the table.
    view = make_view(hand(1), table(8, 9))
    assert not [m for m in view.possible_moves() if isinstance(m, Show)]
    move = RushPlayer().decide(view)
    assert move == ScoutShow(Scout(False, True, 0), Show(0, 1))
    assert not view.hand_after(move)


def test_rush_fallback_scout():
    assert RushPlayer().decide(make_view(Hand())) == Scout(True, False, 0)


def test_rush_flip_hand():
    # Face up 1,5,9 needs three Shows; face down it's the run 2,3,4.
    h = Hand([Card(1, 2), Card(5, 3), Card(9, 4)])
    assert RushPlayer().flip_hand(h)
    assert not RushPlayer().flip_hand(h.flipped())


@pytest.mark.parametrize("num_players", [3, 4, 5])
def test_rush_game_completes(num_players):
    result = run([RushPlayer() for _ in range(num_players)],
                 random.Random(num_players), CONFIG)
    assert isinstance(result, GameResult)
    assert len(result.scores) == num_players
    assert result.scores[result.winner] >= CONFIG.winner_bonus


def test_rush_is_deterministic():
    results = [run([RushPlayer() for _ in range(3)], random.Random(11), CONFIG)
               for _ in range(2)]
    assert results[0] == results[1]


def test_random_player():
    view = make_view(hand(4, 5), table(3))
    player = RandomPlayer(random.Random(0))
    for _ in range(20):
        assert player.decide(view) in view.possible_moves()


def test_run_checks_player_count():
    with pytest.raises(InvalidPlayerCount):
        run([RushPlayer(), RushPlayer()])


def test_run_halts_on_quit():
    with pytest.raises(GameHalted) as e:
        run([Scripted([Quit()]), RushPlayer(), RushPlayer()], random.Random(0))
    assert e.value.reason == "quit"
    assert e.value.state.phase is Phase.HALTED
    assert e.value.state.turn == 0


def test_run_asks_again_after_invalid_action():
    first = Scripted([Show(5, 2), Show(0, 0), Quit()])
    second = Scripted([Quit()])
    with pytest.raises(GameHalted) as e:
        run([first, second, RushPlayer()], random.Random(0))
    assert len(first.rejected) == 1
    assert isinstance(first.rejected[0], InvalidRange)
    # Player 0's Show went through, then player 1 quit.
    assert e.value.state.turn == 1
    assert first.actions == [Quit()]


def test_watch_reports_every_turn():
    events = []
    result = watch([RushPlayer() for _ in range(4)], events.append,
                   random.Random(5), CONFIG)
    assert len(events) == result.turns
    assert [e.turn for e in events] == list(range(1, result.turns + 1))
    assert events[-1].player == result.winner
    assert events[-1].hand_sizes[result.winner] == 0


def test_watch_logs_by_default(caplog):
    caplog.set_level(logging.INFO, logger="scout_game.main")
    result = watch([RushPlayer() for _ in range(3)], rng=random.Random(2),
                   config=CONFIG)
    turns = [r for r in caplog.records if r.name == "scout_game.main"]
    assert len(turns) == result.turns


def test_parse_action():
    assert parse_action("scout 1 0 2") == Scout(True, False, 2)
    assert parse_action("show 0 2") == Show(0, 2)
    assert parse_action("  SHOW 3 3 ") == Show(3, 3)
    assert parse_action("scoutshow 0 1 3 1 2") == \
        ScoutShow(Scout(False, True, 3), Show(1, 2))
    assert parse_action("quit") == Quit()
    for bad in ["", "dance", "scout 1 0", "show a b", "scout 2 0 1",
                "quit now", "scoutshow 1 1 1 1"]:
        with pytest.raises(MalformedAction):
            parse_action(bad)


def _scripted_input(lines):
    it = iter(lines)

    def read(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None
    return read


def test_interactive_player():
    out = []
    player = InteractivePlayer(_scripted_input(["show 0 1", "scout x"]), out.append)
    view = make_view(hand(4, 5))
    assert player.decide(view) == Show(0, 1)
    assert "Hand:" in out[0]
    with pytest.raises(MalformedAction):
        player.decide(view)
    # Out of input.
    assert player.decide(view) == Quit()
    assert not player.flip_hand(view.hand)


def test_interactive_game_reprompts_and_quits():
    out = []
    human = InteractivePlayer(_scripted_input(["n", "bogus", "quit"]), out.append)
    with pytest.raises(GameHalted):
        run([human, RushPlayer(), RushPlayer()], random.Random(0))
    assert any(line.startswith("Not a valid action") for line in out)


def test_main(capsys):
    assert main(["--players", "3", "--seed", "4", "--watch"]) == 0
    out = capsys.readouterr().out
    assert "went out" in out
    assert "turn 1: player 0" in out
    with pytest.raises(SystemExit):
        main(["--players", "2"])
    with pytest.raises(SystemExit):
        main(["--max-set-length", "-1"])


def test_main_halts_when_input_runs_out(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main(["--players", "3", "--humans", "1", "--seed", "1"]) == 1
    out = capsys.readouterr().out
    assert "Game halted (quit)" in out
    assert "GameState(" in out
