# Rule constants and per-game configuration.
from dataclasses import dataclass

MIN_PLAYERS = 3
MAX_PLAYERS = 5
MAX_CARD_VALUE = 9


@dataclass(frozen=True)
class GameConfig:
    # Points for the player who empties their hand.
    winner_bonus: int = 3
    # Longest set that may be shown; None means no cap.
    max_set_length: int | None = 3
    # Each player may Scout & Show only once per round.
    scout_show_once: bool = True
    # Halt after this many committed turns; None means no limit.
    max_turns: int | None = None

    def __post_init__(self):
        if self.max_set_length is not None and self.max_set_length < 1:
            raise ValueError(
                f"max_set_length must be positive, got {self.max_set_length}")
        if self.max_turns is not None and self.max_turns < 1:
            raise ValueError(f"max_turns must be positive, got {self.max_turns}")
