import os
import sys
import logging
from typing import List, Optional

from wordstat.app.pipeline import run_stats
from wordstat.app.settings import settings
from wordstat.app.storage import StatsIOError
from wordstat.app.timing import TimeLogger

LOG_LEVEL = os.getenv("WORDSTAT_LOG_LEVEL", "WARNING").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.WARNING),
    format="%(asctime)s %(levelname)s [freq] %(message)s"
)
log = logging.getLogger("wordstat-freq")

EXIT_USAGE = 2
EXIT_IO_ERROR = 1

def _exit_code(code: int) -> int:
    # modo histórico: 0 en todos los caminos de error
    return 0 if settings.LEGACY_EXIT_CODES else code

def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) != 3:
        sys.stderr.write("usage: freq <fromfile> <tofile>\n")
        return _exit_code(EXIT_USAGE)

    input_path, output_path = argv[1], argv[2]
    try:
        run_stats(input_path, output_path, time_logger=TimeLogger())
    except StatsIOError as e:
        sys.stderr.write(f"{e}\n")
        log.debug("failure detail", exc_info=True)
        return _exit_code(EXIT_IO_ERROR)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
