"""
Exceptions raised by the tournament engine.

Every exception carries a stable ``code`` so callers (forms, host tooling)
can map it to a message without matching on class names. Validation errors
are recoverable by the host; structural errors mean a generated bracket no
longer satisfies its own invariants and the tournament cannot safely
continue.
"""


class TournamentException(Exception):
    code = "TOURNAMENT_ERROR"
    is_structural = False


class DrawNotAllowedException(TournamentException):
    code = "DRAW_NOT_ALLOWED"


class InsufficientParticipantsException(TournamentException):
    code = "INSUFFICIENT_PARTICIPANTS"


class InvalidBracketStateException(TournamentException):
    code = "INVALID_BRACKET_STATE"


class MatchNotFoundException(TournamentException):
    code = "MATCH_NOT_FOUND"
    is_structural = True


class InvalidTransitionException(TournamentException):
    code = "INVALID_TRANSITION"


class RegistrationClosedException(TournamentException):
    code = "REGISTRATION_CLOSED"


class TournamentFullException(TournamentException):
    code = "TOURNAMENT_FULL"


class DuplicateParticipantException(TournamentException):
    code = "DUPLICATE_PARTICIPANT"


class InvalidScoreException(TournamentException):
    code = "INVALID_SCORE"


class InvalidConfigurationException(TournamentException):
    code = "INVALID_CONFIGURATION"
