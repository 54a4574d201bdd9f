"""Exclusive lock over a package store directory.

Mutating registry operations hold this lock for their whole duration, so two
aether processes never interleave changes to the same store. The lock is an
advisory flock() on a file inside the store; it is released when the context
exits, whatever the exit path.
"""

import fcntl
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

LOCK_FILENAME = ".lock"


@contextmanager
def store_lock(store_dir: Path) -> Iterator[Path]:
    """Hold an exclusive lock on store_dir until the block exits.

    Blocks until any other holder releases the lock.

    Yields:
        Path of the lock file
    """
    store_dir.mkdir(parents=True, exist_ok=True)
    lock_path = store_dir / LOCK_FILENAME
    with open(lock_path, "a+") as lock_file:
        logger.debug("Acquiring store lock %s", lock_path)
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield lock_path
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            logger.debug("Released store lock %s", lock_path)
