# --- utils.py ---

import time
import threading
import json
from colorama import Fore, Style, init
import os
import sys

init()

# Hard cap on combinations returned by a single run
MAX_COMBINATIONS = 50_000

# Combinations shown per page
ITEMS_PER_PAGE = 12

# Input used when nothing is given on the command line
DEFAULT_DIGITS = "1243752521494312"

# Input used by --example
EXAMPLE_DIGITS = "1232345"

LOGS_DIR = "logs"

VERBOSE = False
# Log lines go to stderr instead of stdout (set by --copy)
LOG_TO_STDERR = False
start_time = None

# Lock used for synchronized printing across threads
PRINT_LOCK = threading.Lock()

def log_with_time(msg, color=Fore.LIGHTBLUE_EX):
    """Print ``msg`` with a timestamp."""
    global start_time
    if start_time is None:
        start_time = time.time()
    elapsed = time.time() - start_time
    mins = int(elapsed // 60)
    secs = elapsed % 60
    timestamp = Style.DIM + f"[{mins:02}:{secs:06.3f}]" + Style.RESET_ALL
    with PRINT_LOCK:
        stream = sys.stderr if LOG_TO_STDERR else sys.stdout
        print(f"{timestamp} {color}{msg}{Style.RESET_ALL}", file=stream, flush=True)

def vlog(msg, t0=None):
    if VERBOSE:
        if t0 is not None:
            elapsed = time.time() - t0
            log_with_time(f"{msg} (took {elapsed:.3f}s)")
        else:
            log_with_time(msg)

def run_log_path(logs_dir=LOGS_DIR):
    return os.path.join(logs_dir, f"run_{time.strftime('%Y-%m-%d')}.json")

def log_run_to_file(digits, result=None, logs_dir=LOGS_DIR):
    """Log the day's input (and optionally the run summary) to a dated JSON file in ``logs_dir``.
    If the file already holds a result for the same digits, it is replaced only when the new
    run found more combinations."""
    os.makedirs(logs_dir, exist_ok=True)
    log_file = run_log_path(logs_dir)

    log_data = {"digits": digits}

    if os.path.exists(log_file):
        try:
            with open(log_file, 'r') as f:
                existing = json.load(f)
        except (OSError, ValueError):
            existing = {}
        if not isinstance(existing, dict):
            existing = {}
        if existing.get("digits") == digits:
            log_data = existing

    if result:
        existing_result = log_data.get("result")
        if not existing_result or result["count"] > existing_result.get("count", -1):
            log_data["result"] = result
            log_with_time(f"Updated result in {log_file}", color=Fore.GREEN)
        else:
            log_with_time(f"Existing result in {log_file} has equal or more combinations; not updated.", color=Fore.YELLOW)
    else:
        log_with_time(f"Input logged to {log_file}", color=Fore.GREEN)

    with open(log_file, 'w') as f:
        json.dump(log_data, f, indent=2)
    return log_file

def load_run_log(log_path):
    """Read a run log written by :func:`log_run_to_file`."""
    with open(log_path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict) or "digits" not in data:
        raise ValueError(f"{log_path} does not contain a digits entry")
    return data
