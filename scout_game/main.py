# Play a round of Scout: the game loop and a small command line front end.
import argparse
import logging
import random
import sys
from collections.abc import Callable, Sequence

from .common import Scout, Show, ScoutShow, Strategy
from .config import GameConfig
from .errors import GameHalted, InvalidPlayerCount, ValidationError
from .game_state import GameResult, Halted, RoundOver, TurnEvent, deal
from .players import InteractivePlayer, RushPlayer

logger = logging.getLogger(__name__)


def describe_event(event: TurnEvent) -> str:
    action = event.action
    parts = [f"turn {event.turn}: player {event.player}"]
    if isinstance(action, (Scout, ScoutShow)):
        scout = action if isinstance(action, Scout) else action.scout
        side = "left" if scout.left else "right"
        flipped = " flipped" if scout.flip else ""
        parts.append(f"scouts {event.scouted} from the {side}{flipped} "
                     f"to position {scout.index}")
    if isinstance(action, (Show, ScoutShow)):
        parts.append("shows " + " ".join(str(c) for c in event.shown))
    if event.retired:
        parts.append("(set retired)")
    parts.append(f"hands={list(event.hand_sizes)} scores={list(event.scores)}")
    return " ".join(parts)


def log_turn(event: TurnEvent) -> None:
    logger.info("%s", describe_event(event))


def _play(strategies: Sequence[Strategy], rng: random.Random | None,
          config: GameConfig | None,
          on_turn: Callable[[TurnEvent], None] | None) -> GameResult:
    state = deal(len(strategies), rng, config)
    state.flip_hands([s.flip_hand(h) for (s, h) in zip(strategies, state.hands)])
    while True:
        player = state.current_player
        strategy = strategies[player]
        view = state.view()
        committed = len(state.history)
        try:
            outcome = state.step(strategy.decide(view))
        except ValidationError as e:
            # Nothing changed; ask the same player again.
            logger.warning("Player %d: %s", player, e)
            strategy.notify_invalid(view, e)
            continue
        if on_turn is not None and len(state.history) > committed:
            on_turn(state.history[-1])
        if isinstance(outcome, Halted):
            raise GameHalted(outcome.state, outcome.reason)
        if isinstance(outcome, RoundOver):
            return outcome.result


def run(strategies: Sequence[Strategy], rng: random.Random | None = None,
        config: GameConfig | None = None) -> GameResult:
    # Deal and play one round with one strategy per seat (3-5 of them) and
    # return the round scores. Raises GameHalted, carrying the game state, if
    # a strategy quits.
    return _play(strategies, rng, config, None)


def watch(strategies: Sequence[Strategy],
          on_turn: Callable[[TurnEvent], None] = log_turn,
          rng: random.Random | None = None,
          config: GameConfig | None = None) -> GameResult:
    # Like run(), but on_turn sees every committed turn.
    return _play(strategies, rng, config, on_turn)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Play a round of Scout.")
    parser.add_argument("--players", type=int, default=4,
                        help="Number of players (3-5)")
    parser.add_argument("--humans", type=int, default=0,
                        help="How many of the seats (from seat 0) are played interactively")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the deal")
    parser.add_argument("--watch", action="store_true",
                        help="Print every turn")
    parser.add_argument("--max-set-length", type=int,
                        default=GameConfig.max_set_length,
                        help="Longest set that can be shown, 0 for no limit")
    parser.add_argument("--winner-bonus", type=int,
                        default=GameConfig.winner_bonus,
                        help="Points for emptying your hand")
    parser.add_argument("--log-level", default="WARNING",
                        help="Logging level, e.g. INFO or DEBUG")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        config = GameConfig(winner_bonus=args.winner_bonus,
                            max_set_length=args.max_set_length or None)
    except ValueError as e:
        parser.error(str(e))
    strategies = [InteractivePlayer() if i < args.humans
                  else RushPlayer(config.max_set_length)
                  for i in range(args.players)]
    rng = random.Random(args.seed)
    try:
        if args.watch:
            result = watch(strategies, lambda e: print(describe_event(e)),
                           rng, config)
        else:
            result = run(strategies, rng, config)
    except InvalidPlayerCount as e:
        parser.error(str(e))
    except GameHalted as e:
        print(f"{e}\n{e.state!r}")
        return 1

    print(f"Player {result.winner} went out after {result.turns} turns")
    for player, score in enumerate(result.scores):
        print(f"  player {player}: {score}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
