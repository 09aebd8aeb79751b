# wordstat/app/stats.py

import re
import string
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Tuple

# Solo letras ASCII (equivalente a isalpha en locale "C")
WORD_RE = re.compile(rb"[A-Za-z]+")
LOWER = string.ascii_lowercase.encode("ascii")

@dataclass(frozen=True)
class WordRecord:
    word: str
    count: int

    def rank_key(self) -> Tuple[int, str]:
        return (-self.count, self.word)

    def __lt__(self, other: "WordRecord") -> bool:
        # count descendente, luego word ascendente
        return (self.count > other.count) or (
            self.count == other.count and self.word < other.word
        )

def rank_key(record: WordRecord) -> Tuple[int, str]:
    return record.rank_key()

def count_words(chunks: Iterable[bytes]) -> Counter:
    """
    Agrupa corridas contiguas de letras ASCII (en minúsculas) y cuenta cada palabra.
    Una palabra partida entre dos chunks se une antes de contarse.
    """
    counts: Counter = Counter()
    tail = b""
    for chunk in chunks:
        if not chunk:
            continue
        buf = tail + chunk.lower()
        tail = b""
        # si el chunk termina en letra, la última palabra puede seguir en el próximo
        if buf[-1:].isalpha():
            head = buf.rstrip(LOWER)
            tail = buf[len(head):]
            buf = head
        counts.update(w.decode("ascii") for w in WORD_RE.findall(buf))
    if tail:
        counts[tail.decode("ascii")] += 1
    return counts

def build_records(table: Counter) -> List[WordRecord]:
    """Vacía la tabla y devuelve un WordRecord por entrada, en orden arbitrario."""
    records: List[WordRecord] = []
    while table:
        word, count = table.popitem()
        records.append(WordRecord(word=word, count=count))
    return records

def total_tokens(records: Iterable[WordRecord]) -> int:
    return sum(r.count for r in records)
