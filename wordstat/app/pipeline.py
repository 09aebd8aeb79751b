import logging
from typing import List, Optional, Tuple

from .sorter import parallel_merge_sort
from .stats import WordRecord, build_records
from .storage import StatsIOError, read_and_count, write_stats
from .timing import TimeLogger

log = logging.getLogger(__name__)

PHASE_READ = "read and count stats"
PHASE_SORT = "sort stats"
PHASE_WRITE = "write stats"

def convert_and_sort(table, budget: Optional[int] = None) -> List[WordRecord]:
    records = build_records(table)
    return parallel_merge_sort(records, budget=budget)

def run_stats(input_path: str, output_path: str,
              time_logger: Optional[TimeLogger] = None,
              budget: Optional[int] = None) -> List[WordRecord]:
    """
    read+count -> sort -> write. Un fallo de lectura corta antes de tocar el
    archivo de salida; un fallo de escritura descarta el resultado ordenado.
    """
    time_logger = time_logger or TimeLogger()

    table = read_and_count(input_path)
    time_logger.log_time(PHASE_READ)
    log.info("counted %d distinct words in %s", len(table), input_path)

    records = convert_and_sort(table, budget=budget)
    time_logger.log_time(PHASE_SORT)

    write_stats(records, output_path)
    time_logger.log_time(PHASE_WRITE)
    log.info("wrote %d records to %s", len(records), output_path)
    return records

def run_job(input_path: str, output_path: str,
            time_logger: Optional[TimeLogger] = None) -> Tuple[bool, str, str]:
    try:
        records = run_stats(input_path, output_path, time_logger=time_logger)
        return True, output_path, f"{len(records)} records written"
    except StatsIOError as e:
        return False, "", f"error: {e}"
