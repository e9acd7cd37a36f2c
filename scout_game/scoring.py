# End-of-round scoring.
from collections.abc import Sequence

from .cards import Hand
from .common import ActiveSet
from .config import GameConfig


def score_round(final_hands: Sequence[Hand], active_set: ActiveSet | None,
                scout_tokens: Sequence[int], winner_bonus: int = GameConfig.winner_bonus) -> list[int]:
    # Score a finished round, one entry per player:
    # - the player who emptied their hand gets winner_bonus, everybody else
    #   loses a point per card still in hand;
    # - every player keeps the scout tokens they banked during the round;
    # - whoever owns the set left on the table gets a point per card in it.
    if len(final_hands) != len(scout_tokens):
        raise ValueError(
            f"{len(final_hands)} hands but {len(scout_tokens)} token counts")
    scores = []
    for player, hand in enumerate(final_hands):
        score = winner_bonus if not hand else -len(hand)
        score += scout_tokens[player]
        if active_set is not None and active_set.owner == player:
            score += len(active_set)
        scores.append(score)
    return scores
