class ElectionError(ValueError):
    """Base class for every rejected election operation."""

    code = "election_error"

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__doc__)


class Unauthorized(ElectionError):
    """Caller is not the administrator."""

    code = "unauthorized"


class NotRegistered(ElectionError):
    """Caller is not a registered voter."""

    code = "not_registered"


class AlreadyRegistered(ElectionError):
    """Voter is already registered."""

    code = "already_registered"


class WrongPhase(ElectionError):
    """Operation is not allowed in the current workflow status."""

    code = "wrong_phase"


# Transition preconditions and phase-gated voter operations share one kind.
InvalidTransition = WrongPhase


class AlreadyVoted(ElectionError):
    """Voter has already voted."""

    code = "already_voted"


class InvalidProposal(ElectionError):
    """Proposal not found."""

    code = "invalid_proposal"


class ResultsNotReady(ElectionError):
    """Votes have not been tallied yet."""

    code = "results_not_ready"


class NoProposals(ElectionError):
    """Cannot tally an election without proposals."""

    code = "no_proposals"
