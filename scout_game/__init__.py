# A Scout (card game) engine.
from .cards import Card, Facing, Hand, build_deck, deal_hands
from .common import (ActiveSet, Quit, Scout, ScoutShow, SetKind, Show,
                     PlayerView, Strategy, rank)
from .config import GameConfig
from .errors import (EmptyHand, GameFinished, GameHalted, IllegalShape,
                     IndexOutOfBounds, InsufficientRank, InvalidPlayerCount,
                     InvalidRange, MalformedAction, NoActiveSet, ScoutError,
                     ScoutShowUsed, ValidationError)
from .game_state import (Continue, GameResult, GameState, Halted, RoundOver,
                         TurnEvent, deal, step)
from .main import run, watch
from .players import InteractivePlayer, RandomPlayer, RushPlayer
from .scoring import score_round
