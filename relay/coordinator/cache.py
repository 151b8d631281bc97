"""Client-side answer cache applying the version staleness rule."""

from __future__ import annotations

from relay.state import AnswerRecord


class AnswerCache:
    """Local copy of the server's answer.

    ``apply`` is used for both pushed and pulled records and only adopts
    strictly newer versions. ``resync`` adopts the server record whatever its
    version; call it once after (re)connecting so a server restart, which
    resets the version to 0, cannot freeze the cache.
    """

    def __init__(self) -> None:
        self._record = AnswerRecord()

    @property
    def record(self) -> AnswerRecord:
        return self._record

    @property
    def version(self) -> int:
        return self._record.version

    def apply(self, record: AnswerRecord) -> bool:
        if not record.is_newer_than(self._record.version):
            return False
        self._record = record
        return True

    def resync(self, record: AnswerRecord) -> bool:
        changed = record != self._record
        self._record = record
        return changed


__all__ = ["AnswerCache"]
