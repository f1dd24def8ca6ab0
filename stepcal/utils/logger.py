import sys
import time
from datetime import datetime
from pathlib import Path


def default_log_path(prefix="stepcal", log_dir="."):
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(log_dir) / f"{prefix}_log_{stamp}.txt"


class RunLog:
    """
    Tee for a calibration or sweep run: everything printed goes to the
    console and to a log file framed by a start header and an elapsed-time footer

    Use as a context manager, or through start_logging / stop_logging.
    """

    def __init__(self, log_file=None, prefix="stepcal", log_dir="."):
        self.run_name = prefix
        self.log_file = Path(log_file) if log_file is not None else default_log_path(prefix, log_dir)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.console = None
        self._handle = self.log_file.open("w", encoding="utf-8")
        self._started = time.perf_counter()
        self._handle.write(f"# {self.run_name} started {datetime.now().isoformat(timespec='seconds')}\n")

    @property
    def active(self):
        return self.console is not None

    def write(self, text):
        if self.console is not None:
            self.console.write(text)
        if not self._handle.closed:
            self._handle.write(text)
            self._handle.flush()

    def flush(self):
        if self.console is not None:
            self.console.flush()
        if not self._handle.closed:
            self._handle.flush()

    def attach(self):
        """Route sys.stdout through this log"""
        if self.console is None:
            self.console = sys.stdout
            sys.stdout = self
        return self

    def detach(self):
        """Restore the console and close the file; safe to call twice"""
        if self.console is not None:
            sys.stdout = self.console
            self.console = None
        if not self._handle.closed:
            elapsed = time.perf_counter() - self._started
            self._handle.write(f"\n# {self.run_name} finished after {elapsed:.1f}s\n")
            self._handle.close()

    def __enter__(self):
        return self.attach()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.detach()


def start_logging(log_file=None, prefix="stepcal", log_dir="."):
    """Start teeing console output to a run log"""
    return RunLog(log_file, prefix=prefix, log_dir=log_dir).attach()


def stop_logging(run_log):
    run_log.detach()
    print(f"\nLog saved to: {run_log.log_file}")
