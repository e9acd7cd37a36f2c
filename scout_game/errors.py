# Error kinds raised by the Scout engine. None of them are fatal to the
# engine: every ValidationError is raised before any state has been touched.


class ScoutError(Exception):
    # Base class for everything the engine raises on purpose.
    pass


class InvalidPlayerCount(ScoutError):
    def __init__(self, player_count):
        super().__init__(f"Only 3-5 players supported, got {player_count}")
        self.player_count = player_count


class ValidationError(ScoutError):
    # An action was rejected. The game state is unchanged.
    pass


class EmptyHand(ValidationError):
    pass


class IndexOutOfBounds(ValidationError):
    pass


class InvalidRange(ValidationError):
    pass


class NoActiveSet(ValidationError):
    pass


class IllegalShape(ValidationError):
    # Neither a flush nor a straight, or longer than allowed.
    pass


class InsufficientRank(ValidationError):
    pass


class MalformedAction(ValidationError):
    # A strategy returned something that isn't a well-formed action.
    pass


class ScoutShowUsed(ValidationError):
    pass


class GameFinished(ScoutError):
    # step() was called on a game that is over or halted.
    pass


class GameHalted(ScoutError):
    # Carries the last consistent state so callers can dump it.
    def __init__(self, state, reason: str = "quit"):
        super().__init__(f"Game halted ({reason})")
        self.state = state
        self.reason = reason
