# Shared types: actions, sets and their ranking, the move validator, the
# player-facing view of the game, and the Strategy interface.
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from .cards import Card, Hand
from .errors import (IllegalShape, InsufficientRank, MalformedAction,
                     NoActiveSet, ScoutShowUsed, ValidationError)

# Classes that represent actions a player can take.


@dataclass(frozen=True)
class Scout:
    left: bool  # take the leftmost card of the active set (else rightmost)
    flip: bool
    index: int  # insert position in the hand, 0..len(hand)


@dataclass(frozen=True)
class Show:
    start: int
    stop: int  # inclusive


@dataclass(frozen=True)
class ScoutShow:
    scout: Scout
    show: Show


@dataclass(frozen=True)
class Quit:
    pass


Move: TypeAlias = Scout | Show | ScoutShow
Action: TypeAlias = Move | Quit

# Set shapes and ranking.


class SetKind(Enum):
    FLUSH = "flush"
    STRAIGHT = "straight"


def is_flush(values) -> bool:
    return all(v == values[0] for v in values[1:])


def is_straight(values) -> bool:
    # Strictly consecutive, either ascending or descending.
    if len(values) < 2:
        return True
    step = values[1] - values[0]
    if step not in (1, -1):
        return False
    return all(values[i] - values[i - 1] == step for i in range(2, len(values)))


def classify(values, max_set_length: int | None = None) -> SetKind:
    if not values:
        raise IllegalShape("A set needs at least one card")
    if max_set_length is not None and len(values) > max_set_length:
        raise IllegalShape(
            f"Sets are limited to {max_set_length} cards, got {len(values)}")
    # A single card counts as both; we report it as a flush.
    if is_flush(values):
        return SetKind.FLUSH
    if is_straight(values):
        return SetKind.STRAIGHT
    raise IllegalShape(f"{list(values)} is neither a flush nor a straight")


def rank(values) -> tuple[int, int]:
    # Longer sets win; among equally long sets the higher top card wins.
    return (len(values), max(values))


@dataclass(frozen=True)
class ActiveSet:
    cards: tuple[Card, ...]
    owner: int
    kind: SetKind

    def __len__(self):
        return len(self.cards)

    def values(self) -> tuple[int, ...]:
        return tuple(c.value for c in self.cards)

    def rank(self) -> tuple[int, int]:
        return rank(self.values())

    def scout_from(self, left: bool) -> tuple[Card, "ActiveSet | None"]:
        # Taking an end card never breaks a flush or straight, so the
        # remainder stays a valid set. Taking the last card empties the table.
        card, remaining = Hand(self.cards).scout_from(left)
        if not remaining:
            return card, None
        return card, ActiveSet(remaining.cards, self.owner,
                               classify(remaining.values()))

    def __str__(self):
        return " ".join(str(c) for c in self.cards)


# The move validator. All of these are pure: they compute the hand and table
# an action would produce, or raise a ValidationError, and never modify
# their inputs. The engine commits a Resolution only once it exists, which
# makes Scout & Show all-or-nothing.


@dataclass(frozen=True)
class Resolution:
    hand: Hand
    active_set: ActiveSet | None
    scouted: Card | None = None  # card as it was on the table
    shown: tuple[Card, ...] = ()
    discarded: tuple[Card, ...] = ()  # the set that was beaten, if any


def _check_int(name, v):
    # bool is an int subclass, but True is not a position.
    if not isinstance(v, int) or isinstance(v, bool):
        raise MalformedAction(f"{name} must be an integer, got {v!r}")


def _check_bool(name, v):
    if not isinstance(v, bool):
        raise MalformedAction(f"{name} must be a boolean, got {v!r}")


def check_well_formed(action) -> None:
    if isinstance(action, Quit):
        return
    if isinstance(action, Scout):
        _check_bool("left", action.left)
        _check_bool("flip", action.flip)
        _check_int("index", action.index)
    elif isinstance(action, Show):
        _check_int("start", action.start)
        _check_int("stop", action.stop)
    elif isinstance(action, ScoutShow):
        if not isinstance(action.scout, Scout) or not isinstance(action.show, Show):
            raise MalformedAction(f"Malformed scout & show: {action!r}")
        check_well_formed(action.scout)
        check_well_formed(action.show)
    else:
        raise MalformedAction(f"Not an action: {action!r}")


def resolve_scout(hand: Hand, active_set: ActiveSet | None,
                  scout: Scout) -> Resolution:
    if active_set is None:
        raise NoActiveSet("There is nothing on the table to scout")
    card, remaining = active_set.scout_from(scout.left)
    new_hand = hand.insert_at(scout.index, card, scout.flip)
    return Resolution(new_hand, remaining, scouted=card)


def resolve_show(hand: Hand, active_set: ActiveSet | None, show: Show,
                 player: int, max_set_length: int | None = None) -> Resolution:
    shown, remaining = hand.remove_range(show.start, show.stop)
    values = tuple(c.value for c in shown)
    kind = classify(values, max_set_length)
    if active_set is not None and rank(values) <= active_set.rank():
        raise InsufficientRank(
            f"{list(values)} {rank(values)} does not beat "
            f"{list(active_set.values())} {active_set.rank()}")
    discarded = active_set.cards if active_set is not None else ()
    return Resolution(remaining, ActiveSet(shown, player, kind),
                      shown=shown, discarded=discarded)


def resolve_move(hand: Hand, active_set: ActiveSet | None, move: Move,
                 player: int, max_set_length: int | None = None,
                 can_scout_show: bool = True) -> Resolution:
    check_well_formed(move)
    if isinstance(move, Scout):
        return resolve_scout(hand, active_set, move)
    elif isinstance(move, Show):
        return resolve_show(hand, active_set, move, player, max_set_length)
    elif isinstance(move, ScoutShow):
        if not can_scout_show:
            raise ScoutShowUsed(f"Player {player} already used Scout & Show")
        # Simulate the Scout, then check the Show against its result.
        scouted = resolve_scout(hand, active_set, move.scout)
        shown = resolve_show(scouted.hand, scouted.active_set, move.show,
                             player, max_set_length)
        return Resolution(shown.hand, shown.active_set,
                          scouted=scouted.scouted, shown=shown.shown,
                          discarded=shown.discarded)
    raise MalformedAction("Quit has no resolution")


# PlayerView is the information available to the acting player: their own
# hand, how many cards everyone holds, the table and the scores. It is built
# fresh for every decision out of immutable values, so a strategy can keep
# it around but cannot change the game through it.


@dataclass(frozen=True)
class PlayerView:
    num_players: int
    current_player: int
    hand: Hand
    active_set: ActiveSet | None
    hand_sizes: tuple[int, ...]
    scores: tuple[int, ...]
    can_scout_show: bool
    max_set_length: int | None
    turn: int

    def resolve(self, move: Move) -> Resolution:
        return resolve_move(self.hand, self.active_set, move,
                            self.current_player, self.max_set_length,
                            self.can_scout_show)

    def is_valid(self, move: Move) -> bool:
        try:
            self.resolve(move)
        except ValidationError:
            return False
        return True

    def hand_after(self, move: Move) -> Hand:
        return self.resolve(move).hand

    def _show_candidates(self, hand_size: int, min_length: int) -> list[Show]:
        max_length = self.max_set_length or hand_size
        return [Show(start, start + length - 1)
                for start in range(hand_size)
                for length in range(max(min_length, 1), max_length + 1)
                if start + length <= hand_size]

    def _legal_shows(self, hand: Hand,
                     active_set: ActiveSet | None) -> list[tuple[Show, Resolution]]:
        # Shape and rank are checked on the values first; only the survivors
        # get resolved.
        values = hand.values()
        min_length = len(active_set) if active_set else 0
        shows = []
        for show in self._show_candidates(len(hand), min_length):
            meld = values[show.start:show.stop + 1]
            if not is_flush(meld) and not is_straight(meld):
                continue
            if active_set is not None and rank(meld) <= active_set.rank():
                continue
            shows.append((show, resolve_show(hand, active_set, show,
                                             self.current_player,
                                             self.max_set_length)))
        return shows

    def legal_moves(self) -> list[tuple[Move, Resolution]]:
        # Every legal move with what it would do, in a fixed order: Scouts,
        # then Shows, then Scout & Shows.
        scouts = []
        if self.active_set is not None:
            ends = [True, False] if len(self.active_set) > 1 else [True]
            for left in ends:
                for flip in (False, True):
                    for index in range(len(self.hand) + 1):
                        scout = Scout(left, flip, index)
                        scouts.append((scout, resolve_scout(
                            self.hand, self.active_set, scout)))

        shows = self._legal_shows(self.hand, self.active_set)

        scout_shows = []
        if self.can_scout_show:
            for scout, scouted in scouts:
                for show, shown in self._legal_shows(scouted.hand,
                                                     scouted.active_set):
                    scout_shows.append((ScoutShow(scout, show), Resolution(
                        shown.hand, shown.active_set, scouted=scouted.scouted,
                        shown=shown.shown, discarded=shown.discarded)))

        return scouts + shows + scout_shows

    def possible_moves(self) -> list[Move]:
        return [move for (move, _) in self.legal_moves()]


class Strategy(ABC):
    # The engine calls decide() with the view of the acting player and gets
    # back one action. How the strategy gets there - asking a human, a
    # search, a lookup - is its own business.
    @abstractmethod
    def decide(self, view: PlayerView) -> Action:
        pass

    def flip_hand(self, hand: Hand) -> bool:
        # Called once per round, before the first turn.
        return False

    def notify_invalid(self, view: PlayerView, error: ValidationError) -> None:
        # Called when the last decision was rejected; decide() follows.
        pass
