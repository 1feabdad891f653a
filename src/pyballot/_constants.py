"""Internal constants shared across the library."""

SECONDS_PER_DAY = 86400
ENDED_LABEL = "Ended"
NO_LEADER_LABEL = "No votes yet"

# ------------------------------------------------------------------
# Contract custom errors, grouped by how they surface to callers
# ------------------------------------------------------------------

UNAUTHORIZED_ERRORS: frozenset[str] = frozenset({"VotingSystem__NotAdmin"})
STATE_CONFLICT_ERRORS: frozenset[str] = frozenset(
    {
        "VotingSystem__AlreadyVoted",
        "VotingSystem__VotingAlreadyStarted",
        "VotingSystem__VotingNotActive",
        "VotingSystem__VotingStillActive",
    }
)
INVALID_INPUT_ERRORS: frozenset[str] = frozenset(
    {
        "VotingSystem__InvalidCandidate",
        "VotingSystem__InvalidVotingPeriod",
    }
)
CONTRACT_ERRORS: frozenset[str] = UNAUTHORIZED_ERRORS | STATE_CONFLICT_ERRORS | INVALID_INPUT_ERRORS


def days_to_seconds(days: int) -> int:
    """Convert a voting duration in whole days to seconds.

    Raises :class:`ValueError` for anything that is not an integer ``>= 1``.
    """
    if isinstance(days, bool) or not isinstance(days, int):
        raise ValueError(f"duration must be a whole number of days, got {days!r}")
    if days < 1:
        raise ValueError(f"duration must be at least 1 day, got {days}")
    return days * SECONDS_PER_DAY
