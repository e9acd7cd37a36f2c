# Strategies: a greedy "rush" heuristic, a random baseline, and a human
# at the keyboard.
import random
from collections.abc import Callable

from .cards import Hand
from .common import (Action, Move, PlayerView, Quit, Resolution, Scout,
                     ScoutShow, Show, Strategy, is_flush, is_straight)
from .config import GameConfig
from .errors import MalformedAction, ValidationError


def turns_to_empty(values, max_set_length: int | None = None,
                   cache: dict | None = None) -> int:
    # Minimum number of Shows needed to play out a hand, ignoring the table
    # and the other players. Explores every way of removing a flush or
    # straight, memoised in cache (pass the same dict to reuse work across
    # calls).
    if cache is None:
        cache = {}
    return _turns_to_empty(tuple(values), max_set_length, cache)


def _turns_to_empty(values: tuple[int, ...], max_set_length, cache) -> int:
    if not values:
        return 0
    key = (max_set_length, values)
    if key in cache:
        return cache[key]
    n = len(values)
    limit = n if max_set_length is None else min(max_set_length, n)
    lower_bound = -(-n // limit)
    best = n  # one card at a time always works
    for start in range(n):
        if best == lower_bound:
            break
        for length in range(1, limit + 1):
            stop = start + length
            if stop > n:
                break
            meld = values[start:stop]
            # Extending a broken meld can't fix it.
            if not is_flush(meld) and not is_straight(meld):
                break
            turns = 1 + _turns_to_empty(values[:start] + values[stop:],
                                        max_set_length, cache)
            best = min(best, turns)
    cache[key] = best
    return best


class RushPlayer(Strategy):
    # Plays to go out as fast as possible: any Show beats any Scout, and among
    # Shows the one leaving the fewest turns to empty the hand wins. Weak
    # against big mid-game sets, but quick and fully deterministic.
    def __init__(self, max_set_length: int | None = GameConfig.max_set_length):
        self.max_set_length = max_set_length
        self._cache = {}

    def flip_hand(self, hand: Hand) -> bool:
        up = turns_to_empty(hand.values(), self.max_set_length, self._cache)
        down = turns_to_empty(hand.flipped().values(), self.max_set_length,
                              self._cache)
        return down < up

    def decide(self, view: PlayerView) -> Action:
        moves = view.legal_moves()
        shows = [(m, r) for (m, r) in moves if not isinstance(m, Scout)]
        candidates = shows or [(m, r) for (m, r) in moves if isinstance(m, Scout)]
        if not candidates:
            return Scout(left=True, flip=False, index=0)
        # min() keeps the first of equal keys, so ties go by move order.
        move, _ = min(candidates, key=lambda c: self._key(view, *c))
        return move

    def _key(self, view: PlayerView, move: Move, res: Resolution):
        turns = turns_to_empty(res.hand.values(), view.max_set_length,
                               self._cache)
        # Prefer plain Shows (no token for the opponent, Scout & Show kept
        # for later), then bigger sets.
        return (turns, isinstance(move, ScoutShow), -len(res.shown))


class RandomPlayer(Strategy):
    # A baseline player that randomly selects from the possible moves.
    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def flip_hand(self, hand: Hand) -> bool:
        return self.rng.choice([True, False])

    def decide(self, view: PlayerView) -> Action:
        return self.rng.choice(view.possible_moves())


# Interactive play. Commands, all arguments numeric (1 means true):
#   scout LEFT FLIP INDEX
#   show START STOP                  (inclusive, "show 2 2" plays one card)
#   scoutshow LEFT FLIP INDEX START STOP
#   quit

_ARITY = {"scout": 3, "show": 2, "scoutshow": 5, "quit": 0}


def _parse_bool(token: str) -> bool:
    if token not in ("0", "1"):
        raise MalformedAction(f"Expected 0 or 1, got {token!r}")
    return token == "1"


def _parse_int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise MalformedAction(f"Expected a number, got {token!r}") from None


def parse_action(text: str) -> Action:
    tokens = text.split()
    if not tokens or tokens[0].lower() not in _ARITY:
        raise MalformedAction("Enter one of: scout, show, scoutshow, quit")
    name, args = tokens[0].lower(), tokens[1:]
    if len(args) != _ARITY[name]:
        raise MalformedAction(f"{name} takes {_ARITY[name]} arguments, got {len(args)}")
    if name == "quit":
        return Quit()
    if name == "show":
        return Show(_parse_int(args[0]), _parse_int(args[1]))
    scout = Scout(_parse_bool(args[0]), _parse_bool(args[1]), _parse_int(args[2]))
    if name == "scout":
        return scout
    return ScoutShow(scout, Show(_parse_int(args[3]), _parse_int(args[4])))


def format_view(view: PlayerView) -> str:
    owner = f" (player {view.active_set.owner})" if view.active_set else ""
    lines = [
        f"Player {view.current_player}, turn {view.turn}",
        f"Active set: {view.active_set or '-'}{owner}",
        f"Hand:       {view.hand}",
        f"Indexes:    {' '.join(f'{i:<3}' for i in range(len(view.hand)))}",
        f"Cards held: {list(view.hand_sizes)}  scores: {list(view.scores)}",
    ]
    if not view.can_scout_show:
        lines.append("(Scout & Show already used)")
    return "\n".join(lines)


class InteractivePlayer(Strategy):
    # Asks a human for each move. Input comes from input_fn and prompts go to
    # output_fn, so tests (or another front end) can drive it. Malformed
    # input raises MalformedAction; the game loop reports it and asks again.
    # End of input quits the game.
    def __init__(self, input_fn: Callable[[str], str] = input,
                 output_fn: Callable[[str], None] = print):
        self._input = input_fn
        self._output = output_fn

    def flip_hand(self, hand: Hand) -> bool:
        self._output(f"Hand: {hand}\nFlipped: {hand.flipped()}")
        try:
            answer = self._input("Flip your hand? [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes", "1")

    def decide(self, view: PlayerView) -> Action:
        self._output(format_view(view))
        try:
            line = self._input("Select action: ")
        except EOFError:
            return Quit()
        return parse_action(line)

    def notify_invalid(self, view: PlayerView, error: ValidationError) -> None:
        self._output(f"Not a valid action: {error}")
