"""
Presentation Registry

Volatile, process-local store of converted presentations. Records live only
in memory and are lost on restart; the slide images stay on disk under
``slides_dir/<id>`` until the record is deleted.
"""
import logging
import re
import shutil
import threading
from collections import Counter
from pathlib import Path
from typing import Optional, Union

from src.models.presentation import PresentationRecord, PresentationSummary

from .errors import DuplicatePresentationError, PresentationDeleteError

logger = logging.getLogger(__name__)

SLIDE_NUMBER_PATTERN = re.compile(r"[0-9]+")


class PresentationRegistry:
    """
    Lock-guarded mapping from presentation id to its record.

    A record is inserted whole by the conversion service once conversion has
    finished, so readers never observe a half-built record.
    """

    def __init__(self, slides_dir: Path):
        self._slides_dir = Path(slides_dir)
        self._records: dict[str, PresentationRecord] = {}
        self._lock = threading.RLock()

    @property
    def slides_dir(self) -> Path:
        return self._slides_dir

    def slide_dir_for(self, presentation_id: str) -> Path:
        return self._slides_dir / presentation_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, presentation_id: object) -> bool:
        with self._lock:
            return presentation_id in self._records

    def put(self, record: PresentationRecord) -> None:
        with self._lock:
            if record.id in self._records:
                raise DuplicatePresentationError(f"Presentation {record.id} already registered")
            self._records[record.id] = record
        logger.info(f"Registered presentation {record.id} ({record.slide_count} slides)")

    def get(self, presentation_id: str) -> Optional[PresentationRecord]:
        with self._lock:
            return self._records.get(presentation_id)

    def list_presentations(self) -> list[PresentationSummary]:
        """Summaries of all live records, oldest conversion first."""
        with self._lock:
            records = list(self._records.values())
        records.sort(key=lambda r: r.converted_at)
        return [record.to_summary() for record in records]

    def get_slide(self, presentation_id: str, slide_number: Union[int, str]) -> Optional[str]:
        """
        Look up the URL of a 1-indexed slide.

        Unknown ids, non-numeric slide numbers and out-of-range numbers are
        all reported the same way: None. Strings must be plain ASCII digits.
        """
        if isinstance(slide_number, str):
            if not SLIDE_NUMBER_PATTERN.fullmatch(slide_number):
                return None
            number = int(slide_number)
        elif isinstance(slide_number, int) and not isinstance(slide_number, bool):
            number = slide_number
        else:
            return None

        record = self.get(presentation_id)
        if record is None:
            return None
        return record.slide_url(number)

    def delete(self, presentation_id: str) -> bool:
        """
        Remove a record together with its slide directory.

        Returns False if the id is unknown. Raises PresentationDeleteError if
        the files cannot be removed; the record is kept in that case so that
        lookups never point at missing files.
        """
        with self._lock:
            if presentation_id not in self._records:
                return False

            slide_dir = self.slide_dir_for(presentation_id)
            try:
                if slide_dir.exists():
                    shutil.rmtree(slide_dir)
            except OSError as e:
                logger.error(f"Could not remove {slide_dir}: {e}")
                raise PresentationDeleteError(presentation_id, str(e)) from e

            del self._records[presentation_id]

        logger.info(f"Deleted presentation {presentation_id}")
        return True

    def by_topic(self, topic: str) -> list[PresentationRecord]:
        """Records with a topic containing ``topic``, case-insensitively."""
        needle = topic.strip().lower()
        if not needle:
            return []
        with self._lock:
            records = list(self._records.values())
        return [
            record for record in records
            if any(needle in t.lower() for t in record.topics)
        ]

    def topics(self) -> list[dict]:
        """Topic names with the number of presentations tagged with each."""
        counts: Counter = Counter()
        with self._lock:
            for record in self._records.values():
                for topic in {t.strip().lower() for t in record.topics if t.strip()}:
                    counts[topic] += 1
        return [
            {"name": name, "count": count}
            for name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        ]
