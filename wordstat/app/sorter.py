# wordstat/app/sorter.py

import os
import heapq
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional

from .settings import settings
from .stats import WordRecord, rank_key

log = logging.getLogger(__name__)

def available_parallelism() -> int:
    # respeta la afinidad de CPU donde el sistema la expone
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0)) or 1
    return os.cpu_count() or 1

def initial_budget(parallelism: Optional[int] = None) -> int:
    """B0 = max(1, paralelismo // 2)."""
    p = parallelism or settings.SORT_PARALLELISM or available_parallelism()
    return max(1, p // 2)

def fork_count(length: int, budget: int, threshold: int) -> int:
    """
    Número total de tareas que despacha el árbol de recursión.
    Cada nivel con budget >= 2 y tramo > threshold duplica las ramas.
    """
    levels = 0
    while budget >= 2 and length > threshold:
        levels += 1
        budget -= 2
        # la mitad más grande decide si el nivel siguiente todavía parte
        length = (length + 1) // 2
    return 2 ** levels - 1

def sequential_sort(records: List[WordRecord]) -> List[WordRecord]:
    records.sort(key=rank_key)
    return records

def merge_sorted(records: List[WordRecord], lo: int, mid: int, hi: int):
    """Merge estable de records[lo:mid] y records[mid:hi], ambos ya ordenados."""
    if lo >= mid or mid >= hi:
        return
    # ya están en orden: nada que mezclar
    if not rank_key(records[mid]) < rank_key(records[mid - 1]):
        return
    records[lo:hi] = list(heapq.merge(records[lo:mid], records[mid:hi], key=rank_key))

def _sort_segment(records: List[WordRecord], lo: int, hi: int, budget: int,
                  threshold: int, executor: ThreadPoolExecutor):
    if hi - lo <= threshold or budget < 2:
        records[lo:hi] = sorted(records[lo:hi], key=rank_key)
        return

    mid = lo + (hi - lo) // 2
    left = executor.submit(_sort_segment, records, lo, mid, budget - 2, threshold, executor)
    try:
        _sort_segment(records, mid, hi, budget - 2, threshold, executor)
    finally:
        # el hijo termina siempre antes de salir de este nivel
        wait([left])
    left.result()
    merge_sorted(records, lo, mid, hi)

def parallel_merge_sort(records: List[WordRecord], budget: Optional[int] = None,
                        threshold: Optional[int] = None) -> List[WordRecord]:
    """
    Merge sort fork-join sobre la misma lista. Cada mitad trabaja en un rango
    [lo, hi) disjunto; el merge corre solo cuando ambas mitades terminaron.
    Devuelve la misma lista, ordenada por count desc y word asc.
    """
    if budget is None:
        budget = initial_budget()
    if threshold is None:
        threshold = settings.SORT_THRESHOLD
    threshold = max(1, threshold)

    forks = fork_count(len(records), budget, threshold)
    log.debug("parallel sort n=%d budget=%d threshold=%d forks=%d",
              len(records), budget, threshold, forks)
    if forks == 0:
        return sequential_sort(records)

    # un worker por tarea: un padre bloqueado en wait() nunca deja sin hilo a sus hijos
    with ThreadPoolExecutor(max_workers=forks, thread_name_prefix="sort") as executor:
        _sort_segment(records, 0, len(records), budget, threshold, executor)
    return records
