import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from tn.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Shared log takes INFO and up. DEBUG only goes to latest.log and the per-session debug files.
SHARED_LOG_BYTES = 2 * 1024 * 1024
SHARED_LOG_BACKUPS = 3
DEBUG_RUNS_KEPT = 5

# Adds the handler built by make_handler unless one with the same suffix is already attached.
def _attach(logger: logging.Logger, suffix: str, make_handler, level):
    handler_name = f"{logger.name}:{suffix}"
    if any(h.get_name() == handler_name for h in logger.handlers):
        return False
    handler = make_handler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT))
    handler.set_name(handler_name)
    logger.addHandler(handler)
    return True

# Deletes all but the newest keep-1 debug runs, leaving room for the one about to start.
def _prune_debug_runs(logger: logging.Logger, debug_dir: Path, keep: int):
    runs = sorted(debug_dir.glob(f"{logger.name}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
    for run in runs[max(keep - 1, 0):]:
        try:
            run.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old debug log {run}: {e}")

def get_logger(name = "timenotes", log_dir: Path | None = None, debug_runs: int = DEBUG_RUNS_KEPT) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)

    # Long-lived log shared by every session
    _attach(logger, "shared", lambda: RotatingFileHandler(
        filename=log_dir / f"{name}.log",
        maxBytes=SHARED_LOG_BYTES,
        backupCount=SHARED_LOG_BACKUPS,
        encoding="utf-8",
        delay=True,
    ), logging.INFO)

    # Everything from this session only, overwritten on the next start
    _attach(logger, "latest", lambda: logging.FileHandler(
        filename=log_dir / "latest.log",
        mode="w",
        encoding="utf-8",
        delay=True,
    ), logging.DEBUG)

    # One file per session, so a misbehaving toggle can still be traced a few sessions later
    if debug_runs > 0:
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True,exist_ok=True)
        this_run = debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        if _attach(logger, "debug_run", lambda: logging.FileHandler(filename=this_run, encoding="utf-8", delay=True), logging.DEBUG):
            _prune_debug_runs(logger, debug_dir, debug_runs)

    return logger

log = get_logger()
