"""
Seed Phrase Ceremony - Generate, display and verify a new seed phrase.

The user proves the phrase was written down by rebuilding it, in order,
from a shuffled pool of its words. Selection works on word occurrences,
so phrases with repeated words behave correctly.
"""

import logging
import random
from typing import Optional

from models import SeedPhraseSession
from services import WalletBackend
from .errors import PhraseGenerationFailed

logger = logging.getLogger(__name__)


class SeedPhraseCeremony:
    """
    Holds at most one SeedPhraseSession.

    Args:
        rng: Random source for shuffling (inject a seeded Random in tests)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.SystemRandom()
        self._session: Optional[SeedPhraseSession] = None

    @property
    def session(self) -> Optional[SeedPhraseSession]:
        return self._session

    @property
    def phrase(self) -> Optional[str]:
        return self._session.phrase if self._session else None

    @property
    def pool(self) -> list[str]:
        return list(self._session.shuffled_pool) if self._session else []

    @property
    def selected(self) -> list[str]:
        return list(self._session.selected) if self._session else []

    @property
    def can_verify(self) -> bool:
        return self._session is not None and self._session.is_complete

    async def generate(self, backend: WalletBackend) -> str:
        """Ask the backend for a new phrase."""
        try:
            phrase = await backend.generate_seed_phrase()
        except Exception as e:
            raise PhraseGenerationFailed(f"Failed to generate seed phrase: {e}") from e
        if not phrase or not phrase.strip():
            raise PhraseGenerationFailed("Failed to generate seed phrase")
        return " ".join(phrase.split())

    def begin_display(self, phrase: str) -> SeedPhraseSession:
        """Start showing a phrase. Advancing needs acknowledge()."""
        if not phrase or not phrase.strip():
            raise ValueError("Cannot display an empty seed phrase")
        self._session = SeedPhraseSession(phrase=" ".join(phrase.split()))
        return self._session

    def acknowledge(self) -> None:
        """User confirmed the phrase is saved."""
        self._require_session().acknowledged = True

    def begin_verification(self) -> list[str]:
        """Shuffle the words into the pool and clear any selection."""
        session = self._require_session()
        if not session.acknowledged:
            raise ValueError("Seed phrase must be acknowledged before verification")
        pool = session.words
        self._rng.shuffle(pool)
        session.shuffled_pool = pool
        session.selected = []
        return list(pool)

    def select_word(self, word: str, pool_index: int) -> None:
        """Move the pool occurrence at pool_index to the end of the selection."""
        session = self._require_session()
        if not 0 <= pool_index < len(session.shuffled_pool) or session.shuffled_pool[pool_index] != word:
            raise ValueError(f"No {word!r} at pool position {pool_index}")
        session.shuffled_pool.pop(pool_index)
        session.selected.append(word)

    def deselect_word(self, word: str, selected_index: int) -> None:
        """Move the selected occurrence at selected_index back into the pool."""
        session = self._require_session()
        if not 0 <= selected_index < len(session.selected) or session.selected[selected_index] != word:
            raise ValueError(f"No {word!r} at selected position {selected_index}")
        session.selected.pop(selected_index)
        session.shuffled_pool.append(word)

    def reshuffle(self) -> list[str]:
        """Re-randomize the remaining pool; the selection is untouched."""
        session = self._require_session()
        self._rng.shuffle(session.shuffled_pool)
        return list(session.shuffled_pool)

    def verify(self) -> bool:
        """Exact, ordered comparison of the selection with the phrase."""
        session = self._require_session()
        if not session.is_complete:
            raise ValueError("Select every word before verifying")
        matched = " ".join(session.selected) == session.phrase
        logger.info(f"Seed phrase verification {'succeeded' if matched else 'failed'}")
        return matched

    def discard(self) -> None:
        """Forget the phrase and any partial selection."""
        self._session = None

    def _require_session(self) -> SeedPhraseSession:
        if self._session is None:
            raise ValueError("No seed phrase in progress")
        return self._session
