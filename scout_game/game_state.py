# The Scout engine: game state and turn resolution.
import copy
import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from .cards import Card, Hand, deal_hands
from .common import (ActiveSet, Move, PlayerView, Quit, ScoutShow,
                     check_well_formed, resolve_move)
from .config import MAX_PLAYERS, MIN_PLAYERS, GameConfig
from .errors import GameFinished, InvalidPlayerCount, ScoutError, ValidationError
from .scoring import score_round

logger = logging.getLogger(__name__)


class Phase(Enum):
    AWAITING_ACTION = "awaiting_action"
    RESOLVING = "resolving"
    GAME_OVER = "game_over"
    HALTED = "halted"


@dataclass(frozen=True)
class GameResult:
    scores: tuple[int, ...]
    winner: int  # the player who emptied their hand
    turns: int


@dataclass(frozen=True)
class TurnEvent:
    # What happened in one committed turn. Moves are public in Scout, so
    # this is safe to show to everybody.
    turn: int
    player: int
    action: Move
    scouted: Card | None
    shown: tuple[Card, ...]
    discarded: tuple[Card, ...]
    # Set taken off the table because play came back around to its owner.
    retired: tuple[Card, ...]
    active_set: ActiveSet | None
    hand_sizes: tuple[int, ...]
    scores: tuple[int, ...]


# What step() reports back.


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class RoundOver:
    result: GameResult


@dataclass(frozen=True)
class Halted:
    state: "GameState"
    reason: str = "quit"


TurnOutcome: TypeAlias = Continue | RoundOver | Halted


class GameState:
    num_players: int
    hands: list[Hand]
    active_set: ActiveSet | None
    current_player: int  # index of the player step() will act for
    # Tokens banked by each player, one per card scouted from their sets.
    scout_tokens: list[int]
    # Running scores; the round scores once the round is over.
    scores: list[int]
    # Whether a player may still use their Scout & Show.
    can_scout_show: list[bool]
    discard: list[Card]  # beaten and retired sets
    history: list[TurnEvent]
    turn: int  # number of committed turns
    phase: Phase
    result: GameResult | None
    halt_reason: str | None
    config: GameConfig

    def __init__(self, hands: Sequence[Hand], config: GameConfig | None = None,
                 first_player: int = 0):
        if len(hands) < MIN_PLAYERS or len(hands) > MAX_PLAYERS:
            raise InvalidPlayerCount(len(hands))
        if not 0 <= first_player < len(hands):
            raise ValueError(f"No player {first_player} in a {len(hands)} player game")
        self.num_players = len(hands)
        self.hands = list(hands)
        self.active_set = None
        self.current_player = first_player
        self.scout_tokens = [0] * self.num_players
        self.scores = [0] * self.num_players
        self.can_scout_show = [True] * self.num_players
        self.discard = []
        self.history = []
        self.turn = 0
        self.phase = Phase.AWAITING_ACTION
        self.result = None
        self.halt_reason = None
        self.config = config or GameConfig()

    @property
    def finished(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def halted(self) -> bool:
        return self.phase is Phase.HALTED

    def cards_in_play(self) -> int:
        table = len(self.active_set) if self.active_set else 0
        return sum(len(h) for h in self.hands) + table + len(self.discard)

    def flip_hands(self, decisions: Sequence[bool]):
        # Give each player the option to turn their whole hand around.
        if self.turn or self.phase is not Phase.AWAITING_ACTION:
            raise ScoutError("Hands can only be flipped before the first turn")
        if len(decisions) != self.num_players:
            raise ValueError(
                f"Expected {self.num_players} flip decisions, got {len(decisions)}")
        for player, flip in enumerate(decisions):
            if flip:
                self.hands[player] = self.hands[player].flipped()

    def view(self) -> PlayerView:
        # The information state of the player whose turn it is.
        player = self.current_player
        return PlayerView(
            num_players=self.num_players,
            current_player=player,
            hand=self.hands[player],
            active_set=self.active_set,
            hand_sizes=tuple(len(h) for h in self.hands),
            scores=tuple(self.scores),
            can_scout_show=self.can_scout_show[player],
            max_set_length=self.config.max_set_length,
            turn=self.turn)

    def snapshot(self) -> "GameState":
        return copy.deepcopy(self)

    def step(self, action) -> TurnOutcome:
        # Apply one action for the current player. Illegal actions raise a
        # ValidationError and leave the state exactly as it was; the same
        # player is still to move.
        if self.phase is not Phase.AWAITING_ACTION:
            raise GameFinished(f"Game is {self.phase.value}, no more actions")
        check_well_formed(action)
        if isinstance(action, Quit):
            return self._halt("quit")

        player = self.current_player
        self.phase = Phase.RESOLVING
        try:
            res = resolve_move(self.hands[player], self.active_set, action,
                               player, self.config.max_set_length,
                               self.can_scout_show[player])
        except ValidationError:
            self.phase = Phase.AWAITING_ACTION
            raise

        # Everything below is the commit; nothing in it can fail.
        if res.scouted is not None:
            owner = self.active_set.owner
            self.scout_tokens[owner] += 1
            self.scores[owner] += 1
        if isinstance(action, ScoutShow) and self.config.scout_show_once:
            self.can_scout_show[player] = False
        self.hands[player] = res.hand
        self.active_set = res.active_set
        self.discard.extend(res.discarded)
        self.turn += 1

        if not res.hand:
            self._record(player, action, res, ())
            return self._end_round(player)

        self.current_player = (player + 1) % self.num_players
        retired = ()
        if self.active_set is not None and self.active_set.owner == self.current_player:
            # Nobody beat it; the owner starts over on an empty table.
            retired = self.active_set.cards
            self.discard.extend(retired)
            self.active_set = None
            logger.debug("Set %s retired, back to player %d",
                         " ".join(str(c) for c in retired), self.current_player)
        self._record(player, action, res, retired)

        if self.config.max_turns is not None and self.turn >= self.config.max_turns:
            return self._halt("turn limit")
        self.phase = Phase.AWAITING_ACTION
        return Continue()

    def _record(self, player, action, res, retired):
        event = TurnEvent(
            turn=self.turn,
            player=player,
            action=action,
            scouted=res.scouted,
            shown=res.shown,
            discarded=res.discarded,
            retired=retired,
            active_set=self.active_set,
            hand_sizes=tuple(len(h) for h in self.hands),
            scores=tuple(self.scores))
        self.history.append(event)
        logger.debug("Turn %d: player %d %s", event.turn, player, action)

    def _end_round(self, winner: int) -> RoundOver:
        scores = score_round(self.hands, self.active_set, self.scout_tokens,
                             self.config.winner_bonus)
        self.scores = scores
        self.result = GameResult(tuple(scores), winner, self.turn)
        self.phase = Phase.GAME_OVER
        logger.info("Round over after %d turns, player %d went out: %s",
                    self.turn, winner, scores)
        return RoundOver(self.result)

    def _halt(self, reason: str) -> Halted:
        self.phase = Phase.HALTED
        self.halt_reason = reason
        logger.info("Game halted (%s) on turn %d", reason, self.turn)
        return Halted(self.snapshot(), reason)

    def __repr__(self):
        lines = [f"GameState(turn={self.turn}, phase={self.phase.value}, "
                 f"current_player={self.current_player})"]
        for player, hand in enumerate(self.hands):
            lines.append(f"  player {player}: [{hand}] tokens={self.scout_tokens[player]} "
                         f"score={self.scores[player]}")
        owner = self.active_set.owner if self.active_set else None
        lines.append(f"  table: [{self.active_set or ''}] owner={owner}")
        lines.append(f"  discard: {len(self.discard)} cards")
        return "\n".join(lines)


def deal(num_players: int, rng: random.Random | None = None,
         config: GameConfig | None = None, first_player: int = 0) -> GameState:
    hands = deal_hands(num_players, rng)
    logger.info("Dealt %d hands of %d cards", num_players, len(hands[0]))
    return GameState(hands, config, first_player)


def step(state: GameState, action) -> TurnOutcome:
    return state.step(action)
