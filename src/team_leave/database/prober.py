"""Decide at startup whether the remote database can be used.

The schema check is an ordered list of strategies. Each one answers
PRESENT / ABSENT / INCONCLUSIVE and the first conclusive answer wins, so a
strategy that lacks privileges (catalog access, stored function) simply hands
over to the next one.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import mysql.connector

from ..core.constants import DEFAULT_PROBE_TIMEOUT_SECONDS, MISSING_RELATION_PATTERNS, REQUIRED_TABLES
from ..core.enums import BackendStatus, ProbeOutcome
from ..core.exceptions import BackendError
from ..core.logging import get_logger
from .connection import BackendHandle, DatabaseConnection, InvalidRemoteBackend
from .mysql_base import NO_SUCH_TABLE_ERRNO

logger = get_logger(__name__)


@dataclass(frozen=True)
class BackendDecision:
    status: BackendStatus
    message: Optional[str] = None

    @classmethod
    def unconfigured(cls) -> "BackendDecision":
        return cls(BackendStatus.UNCONFIGURED)

    @classmethod
    def ready(cls) -> "BackendDecision":
        return cls(BackendStatus.READY)

    @classmethod
    def not_provisioned(cls) -> "BackendDecision":
        return cls(BackendStatus.NOT_PROVISIONED)

    @classmethod
    def error(cls, message: str) -> "BackendDecision":
        return cls(BackendStatus.ERROR, message)


class ProbeStrategy(Protocol):
    name: str

    def check(self, conn, tables: Sequence[str]) -> ProbeOutcome:
        raise NotImplementedError


class CatalogProbe:
    """Look the tables up in information_schema."""

    name = "catalog"

    def check(self, conn, tables: Sequence[str]) -> ProbeOutcome:
        placeholders = ",".join(["%s"] * len(tables))
        cur = conn.cursor(dictionary=True)
        try:
            cur.execute(
                f"""
                SELECT table_name AS table_name
                FROM information_schema.tables
                WHERE table_schema = DATABASE() AND table_name IN ({placeholders})
                """,
                tuple(tables),
            )
            rows = cur.fetchall() or []
        except mysql.connector.Error as e:
            logger.info("catalog probe unavailable: %s", e)
            return ProbeOutcome.INCONCLUSIVE
        finally:
            cur.close()

        found = {str(r["table_name"]) for r in rows}
        logger.info("catalog probe found tables: %s", sorted(found))
        return ProbeOutcome.PRESENT if all(t in found for t in tables) else ProbeOutcome.ABSENT


class StoredFunctionProbe:
    """Ask the check_table_exists() function installed by schema.sql."""

    name = "stored_function"

    def check(self, conn, tables: Sequence[str]) -> ProbeOutcome:
        answers: list[Optional[bool]] = []
        for table in tables:
            cur = conn.cursor(dictionary=True)
            try:
                cur.execute("SELECT check_table_exists(%s) AS present", (table,))
                row = cur.fetchone()
                answers.append(bool(row and row.get("present")))
            except mysql.connector.Error as e:
                logger.info("check_table_exists(%s) failed: %s", table, e)
                answers.append(None)
            finally:
                cur.close()

        if all(a is None for a in answers):
            return ProbeOutcome.INCONCLUSIVE
        return ProbeOutcome.PRESENT if all(a is True for a in answers) else ProbeOutcome.ABSENT


def is_missing_table_error(error: mysql.connector.Error) -> bool:
    """Classify a driver error raised by a plain SELECT against a table.

    The structured error code is used when the driver provides one; otherwise the
    message is matched against known "missing relation" phrasings.
    """
    if getattr(error, "errno", None) == NO_SUCH_TABLE_ERRNO:
        return True
    message = str(getattr(error, "msg", None) or error).lower()
    return any(pattern in message for pattern in MISSING_RELATION_PATTERNS)


class DirectTableProbe:
    """Last resort: select zero rows from each table and classify any error."""

    name = "direct"

    def check(self, conn, tables: Sequence[str]) -> ProbeOutcome:
        existing = 0
        for table in tables:
            cur = conn.cursor()
            try:
                cur.execute(f"SELECT 1 FROM `{table}` LIMIT 0")
                cur.fetchall()
                existing += 1
            except mysql.connector.Error as e:
                if not is_missing_table_error(e):
                    # Some unrelated failure: the table is assumed to exist.
                    existing += 1
                logger.info("direct probe on %s raised: %s", table, e)
            finally:
                cur.close()

        logger.info("direct probe: %d/%d tables found", existing, len(tables))
        return ProbeOutcome.PRESENT if existing == len(tables) else ProbeOutcome.ABSENT


DEFAULT_STRATEGIES: tuple = (CatalogProbe(), StoredFunctionProbe(), DirectTableProbe())


def check_schema(
    conn_factory: DatabaseConnection,
    *,
    tables: Sequence[str] = REQUIRED_TABLES,
    strategies: Sequence[ProbeStrategy] = DEFAULT_STRATEGIES,
) -> ProbeOutcome:
    """Run the strategies in order on one connection; first conclusive answer wins."""
    conn = conn_factory.connect()
    try:
        for strategy in strategies:
            outcome = strategy.check(conn, tables)
            logger.info("probe strategy %s -> %s", strategy.name, outcome.value)
            if outcome != ProbeOutcome.INCONCLUSIVE:
                return outcome
        return ProbeOutcome.ABSENT
    finally:
        conn.close()


class BackendProber:
    """Use case: decide whether the remote backend is usable for this session."""

    def __init__(
        self,
        backend: BackendHandle,
        *,
        timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        strategies: Sequence[ProbeStrategy] = DEFAULT_STRATEGIES,
        tables: Sequence[str] = REQUIRED_TABLES,
    ):
        self._backend = backend
        self._timeout = timeout
        self._strategies = tuple(strategies)
        self._tables = tuple(tables)

    def probe(self) -> BackendDecision:
        if not self._backend.configured:
            logger.info("remote backend not configured (%s)", self._backend.reason)
            return BackendDecision.unconfigured()
        if isinstance(self._backend, InvalidRemoteBackend):
            logger.warning("remote backend misconfigured: %s", self._backend.reason)
            return BackendDecision.error(self._backend.reason)

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="schema-probe")
        future = executor.submit(
            check_schema,
            self._backend.conn,
            tables=self._tables,
            strategies=self._strategies,
        )
        try:
            outcome = future.result(timeout=self._timeout)
        except FuturesTimeout:
            logger.warning("schema check did not finish within %ss", self._timeout)
            return BackendDecision.error("Database check timeout")
        except BackendError as e:
            logger.warning("schema check failed: %s", e)
            return BackendDecision.error(str(e))
        except Exception as e:
            logger.exception("unexpected error while probing the database")
            return BackendDecision.error(str(e) or type(e).__name__)
        finally:
            # Never block on a slow check; its eventual result is dropped.
            executor.shutdown(wait=False)

        if outcome == ProbeOutcome.PRESENT:
            return BackendDecision.ready()
        return BackendDecision.not_provisioned()
