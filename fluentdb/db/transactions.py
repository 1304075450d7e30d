# fluentdb — thin fluent SQL wrapper for MySQL, PostgreSQL and SQLite
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Transaction context manager."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

from fluentdb.db.executor import Executor

logger = logging.getLogger(__name__)


@contextmanager
def transaction(executor: Executor) -> Generator[Executor, None, None]:
    """Context manager that commits on success, rolls back on exception.

    Usage::

        with transaction(executor):
            executor.execute("INSERT INTO ...", [...])
            executor.execute("UPDATE ...", [...])
        # auto-committed here

    Nesting is not supported: when ``executor.begin()`` reports that no
    new transaction was started (one is already open), the block still
    runs but neither commits nor rolls back.  The outermost scope that
    actually began the transaction owns its outcome; exceptions always
    propagate unchanged.
    """
    begun = executor.begin()
    if not begun:
        logger.debug("Transaction already open; joining it")

    try:
        yield executor
        if begun:
            executor.commit()
    except Exception:
        if begun:
            executor.rollback()
        raise
