"""
Repository pattern for computed-fact persistence.

Flattens compute summaries into rows and stores them per scenario version.
"""

import logging
from typing import List, Optional

from .db import DEFAULT_DB_PATH, get_connection, transaction
from .models import ComputedFact
from openran_tco.core.engine import ComputeResult, ComputeSummary

logger = logging.getLogger(__name__)

METRIC_TOTAL = "total"
METRIC_BY_DAY_DOMAIN = "by_day_domain"
METRIC_BREAKDOWN = "breakdown"

_COLUMNS = (
    "scenario_version_id, metric, day, domain, layer, bucket, "
    "year, capex, opex, tco, npv"
)


def initialize_schema(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the computed_fact table if it doesn't exist.

    Args:
        db_path: Path to SQLite database file
    """
    conn = get_connection(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS computed_fact (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                scenario_version_id TEXT NOT NULL,
                metric TEXT NOT NULL,
                day TEXT,
                domain TEXT,
                layer TEXT,
                bucket TEXT,
                year INTEGER NOT NULL,
                capex REAL NOT NULL,
                opex REAL NOT NULL,
                tco REAL NOT NULL,
                npv REAL
            )
        """)
        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_computed_fact_version
            ON computed_fact (scenario_version_id)
        """)
        conn.commit()
    finally:
        conn.close()


def flatten_summary(scenario_version_id: str, summary: ComputeSummary) -> List[ComputedFact]:
    """Flatten a summary into storable rows.

    Produces one ``total`` row per year, one ``by_day_domain`` row per
    rollup key (stored at year 0) and one ``breakdown`` row per breakdown
    record.
    """
    facts = []

    for result in summary.by_year:
        facts.append(ComputedFact(
            scenario_version_id=scenario_version_id,
            metric=METRIC_TOTAL,
            year=result.year,
            capex=result.capex,
            opex=result.opex,
            tco=result.tco,
            npv=result.npv
        ))

    for key, totals in summary.by_day_domain.items():
        day, domain = key.split(":")
        facts.append(ComputedFact(
            scenario_version_id=scenario_version_id,
            metric=METRIC_BY_DAY_DOMAIN,
            year=0,
            capex=totals.capex,
            opex=totals.opex,
            tco=totals.tco,
            day=day,
            domain=domain
        ))

    for item in summary.breakdown:
        facts.append(ComputedFact(
            scenario_version_id=scenario_version_id,
            metric=METRIC_BREAKDOWN,
            year=item.year,
            capex=item.capex,
            opex=item.opex,
            tco=item.tco,
            day=item.day.value,
            domain=item.domain.value,
            layer=item.layer.value,
            bucket=item.bucket
        ))

    return facts


class ComputedFactRepository:
    """Repository for storing and querying computed facts.

    A scenario version holds the facts of its latest computation only:
    saving a summary replaces whatever was stored before.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize the repository with a database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def save_summary(self, scenario_version_id: str, summary: ComputeSummary) -> int:
        """Replace a version's computed facts with a new summary.

        Delete and insert happen in a single transaction, so readers never
        see a half-written result.

        Args:
            scenario_version_id: Version the summary was computed for
            summary: Summary to persist

        Returns:
            Number of rows written
        """
        facts = flatten_summary(scenario_version_id, summary)

        with transaction(self.db_path) as conn:
            conn.execute(
                "DELETE FROM computed_fact WHERE scenario_version_id = ?",
                (scenario_version_id,)
            )
            conn.executemany(
                f"INSERT INTO computed_fact ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [_to_row(fact) for fact in facts]
            )

        logger.info(
            "Stored %d computed facts for scenario version %s",
            len(facts), scenario_version_id
        )
        return len(facts)

    def get_facts(
        self,
        scenario_version_id: str,
        metric: Optional[str] = None,
        day: Optional[str] = None,
        domain: Optional[str] = None,
        year: Optional[int] = None
    ) -> List[ComputedFact]:
        """Query a version's computed facts with optional filtering.

        Args:
            scenario_version_id: Version to query
            metric: Optional filter for metric
            day: Optional filter for day
            domain: Optional filter for domain
            year: Optional filter for year

        Returns:
            Facts ordered by year, then metric
        """
        conn = get_connection(self.db_path)
        try:
            query = f"SELECT {_COLUMNS} FROM computed_fact WHERE scenario_version_id = ?"
            params: list = [scenario_version_id]

            if metric:
                query += " AND metric = ?"
                params.append(metric)
            if day:
                query += " AND day = ?"
                params.append(day)
            if domain:
                query += " AND domain = ?"
                params.append(domain)
            if year is not None:
                query += " AND year = ?"
                params.append(year)

            query += " ORDER BY year ASC, metric ASC, id ASC"

            cursor = conn.execute(query, params)
            return [_from_row(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_yearly_totals(self, scenario_version_id: str) -> List[ComputeResult]:
        """Stored per-year totals of a version, ordered by year."""
        return [
            ComputeResult(
                year=fact.year,
                capex=fact.capex,
                opex=fact.opex,
                tco=fact.tco,
                npv=fact.npv if fact.npv is not None else 0.0
            )
            for fact in self.get_facts(scenario_version_id, metric=METRIC_TOTAL)
        ]


def _to_row(fact: ComputedFact) -> tuple:
    return (
        fact.scenario_version_id,
        fact.metric,
        fact.day,
        fact.domain,
        fact.layer,
        fact.bucket,
        fact.year,
        fact.capex,
        fact.opex,
        fact.tco,
        fact.npv
    )


def _from_row(row: tuple) -> ComputedFact:
    return ComputedFact(
        scenario_version_id=row[0],
        metric=row[1],
        day=row[2],
        domain=row[3],
        layer=row[4],
        bucket=row[5],
        year=row[6],
        capex=row[7],
        opex=row[8],
        tco=row[9],
        npv=row[10]
    )
