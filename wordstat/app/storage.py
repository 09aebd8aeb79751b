import os
import pathlib
import logging
from collections import Counter
from typing import Iterable, Iterator, Optional

from .settings import settings
from .stats import WordRecord, count_words

log = logging.getLogger(__name__)

class StatsIOError(OSError):
    """No se pudo abrir/leer/escribir un archivo. Siempre fatal para la fase."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

def ensure_dir(p: str):
    pathlib.Path(p).mkdir(parents=True, exist_ok=True)

def file_size(path: str) -> int:
    return os.path.getsize(path)

def resolve_shared_path(path: str, shared_dir: str) -> str:
    # realpath: un symlink dentro del directorio compartido no puede escapar de él
    normalized_path = os.path.realpath(path)
    shared_dir_abs = os.path.realpath(shared_dir)
    if os.path.commonpath([normalized_path, shared_dir_abs]) != shared_dir_abs:
        raise PermissionError(f"path {normalized_path} must live under {shared_dir_abs}")
    return normalized_path

def iter_file_chunks(f, chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = f.read(chunk_size)
        if not chunk:
            break
        yield chunk

def read_and_count(input_path: str, chunk_size: Optional[int] = None) -> Counter:
    chunk_size = chunk_size or settings.READ_CHUNK_BYTES
    try:
        f = open(input_path, "rb")
    except OSError as e:
        raise StatsIOError(
            f"can't open input file for reading, filename: {input_path}", input_path
        ) from e

    try:
        with f:
            counts = count_words(iter_file_chunks(f, chunk_size))
    except OSError as e:
        raise StatsIOError(
            f"error occurred while reading the file: {e}", input_path
        ) from e

    log.debug("read %s distinct=%d", input_path, len(counts))
    return counts

def write_stats(records: Iterable[WordRecord], output_path: str):
    """Una línea "<word> <count>" por record, en el orden recibido."""
    try:
        out = open(output_path, "w", encoding="ascii", newline="\n")
    except OSError as e:
        raise StatsIOError(
            f"can't open output file for writing, filename: {output_path}", output_path
        ) from e

    written = 0
    try:
        with out:
            for rec in records:
                out.write(f"{rec.word} {rec.count}\n")
                written += 1
    except OSError as e:
        raise StatsIOError(
            f"error occurred while writing into the file: {e}", output_path
        ) from e

    log.debug("wrote %s lines=%d", output_path, written)
    return written
