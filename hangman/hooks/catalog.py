"""In-memory word catalog — development stub for WordCatalog.

List-backed word bank. Data lives only in memory and is lost on restart.
Words are stored uppercased, matching the canonical form the real catalog
promises.

TEAM: Replace this with your real word bank. Subclass WordCatalog from
hangman.hooks.interfaces and implement the three lookups.

Tier 2 service module: imports from hangman.hooks.interfaces (Tier 1)
and hangman.schemas (Tier 1).

Usage:
    from hangman.hooks.catalog import InMemoryWordCatalog

    catalog = InMemoryWordCatalog()
    catalog.add_word(Word(id="w1", text="cat", course_id="c1", teacher_id="t1"))
    await catalog.words_for_course("c1")
"""

from collections.abc import Iterable

from hangman.hooks.interfaces import WordCatalog
from hangman.schemas import Word


class InMemoryWordCatalog(WordCatalog):
    """STUB — list-backed word bank, loses data on restart.

    TEAM: Replace with your catalog adapter. Satisfy the WordCatalog
    interface from hangman.hooks.interfaces.
    """

    def __init__(self, words: Iterable[Word] = ()) -> None:
        self._words: list[Word] = []
        for word in words:
            self.add_word(word)

    def add_word(self, word: Word) -> Word:
        """Stores a word, uppercasing its text. Stub convenience, not part of the ABC."""
        canonical = word.model_copy(update={"text": word.text.upper()})
        self._words.append(canonical)
        return canonical

    async def words_for_teacher(self, teacher_id: str) -> list[Word]:
        return [w for w in self._words if w.teacher_id == teacher_id]

    async def words_for_course(self, course_id: str) -> list[Word]:
        return [w for w in self._words if w.course_id == course_id]

    async def words_for_course_and_teacher(
        self, course_id: str, teacher_id: str
    ) -> list[Word]:
        return [
            w
            for w in self._words
            if w.course_id == course_id and w.teacher_id == teacher_id
        ]
