"""
Assignee identity matching.

Resolves the owner name the model extracted ("John") to a directory identity
using a fixed precedence, first hit wins:

1. exact display-name match among meeting participants   -> 1.0
2. participant display name starts with the name         -> 0.85
3. first directory search result, name contained in it   -> 0.7
   first directory search result otherwise               -> 0.5
4. nothing found                                          -> 0.0

All comparisons are case-insensitive. There is no fuzzy or nickname matching.
"""

from dataclasses import dataclass
from typing import Sequence

from ..clients.directory import DirectoryClient
from ..logging import get_logger
from ..models.identity import Identity, Participant

logger = get_logger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one name. ``user`` is None iff confidence is 0."""

    user: Identity | None
    confidence: float
    matched_via: str = 'none'  # 'exact', 'prefix', 'directory' or 'none'

    @property
    def matched(self) -> bool:
        return self.user is not None


NO_MATCH = MatchResult(user=None, confidence=0.0)


class IdentityMatcher:
    """
    Matches free-text owner names to directory identities.

    Participants are checked first; the directory is searched at most once
    per name and only when no participant matches. Directory errors propagate.
    """

    EXACT_MATCH_CONFIDENCE = 1.0
    PREFIX_MATCH_CONFIDENCE = 0.85
    DIRECTORY_CONTAINS_CONFIDENCE = 0.7
    DIRECTORY_FALLBACK_CONFIDENCE = 0.5

    def __init__(self, directory: DirectoryClient):
        """
        Initialize the matcher.

        Args:
            directory: Directory client used for the search fallback
        """
        self.directory = directory

    async def match(self, name: str, participants: Sequence[Participant]) -> MatchResult:
        """
        Resolve ``name`` against the participants, then the directory.

        Args:
            name: Owner name as stated in the transcript
            participants: Meeting participants in meeting order

        Returns:
            MatchResult with tiered confidence
        """
        needle = name.strip().lower()

        if needle:
            for participant in participants:
                if participant.display_name.lower() == needle:
                    return MatchResult(
                        user=participant.to_identity(),
                        confidence=self.EXACT_MATCH_CONFIDENCE,
                        matched_via='exact',
                    )

            for participant in participants:
                if participant.display_name.lower().startswith(needle):
                    return MatchResult(
                        user=participant.to_identity(),
                        confidence=self.PREFIX_MATCH_CONFIDENCE,
                        matched_via='prefix',
                    )

        results = await self.directory.search(name)
        if not results:
            logger.info('identity_not_found', name=name)
            return NO_MATCH

        best = results[0]
        confidence = (
            self.DIRECTORY_CONTAINS_CONFIDENCE
            if needle and needle in best.display_name.lower()
            else self.DIRECTORY_FALLBACK_CONFIDENCE
        )
        return MatchResult(user=best, confidence=confidence, matched_via='directory')
