import sqlite3
from pathlib import Path
from typing import Union

import pandas as pd

from .arbiter import IntervalResult


def init_db(db_path: Union[str, Path]) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    cur = conn.cursor()
    cur.execute("""
        CREATE TABLE IF NOT EXISTS intervals (
            dataset TEXT,
            interval_index INTEGER,
            start_frame INTEGER,
            end_frame INTEGER,
            n_reference INTEGER,
            n_stationary INTEGER,
            PRIMARY KEY (dataset, interval_index)
        );
    """)
    cur.execute("""
        CREATE TABLE IF NOT EXISTS decisions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            dataset TEXT,
            interval_index INTEGER,
            slot INTEGER,
            anchor_x REAL,
            occupancy_fraction REAL,
            multiplicity INTEGER,
            longest_gap INTEGER,
            tier TEXT,
            flags TEXT,
            stationary INTEGER,
            provenance TEXT
        );
    """)
    conn.commit()
    return conn


def save_interval(conn: sqlite3.Connection, dataset: str, result: IntervalResult) -> None:
    """Write one interval's decisions, replacing any earlier save of the same interval."""
    iv = result.interval
    rows = [
        (dataset, iv.index, d.anchor.slot, d.anchor.position,
         d.classification.fraction, d.classification.multiplicity,
         d.classification.longest_gap, d.classification.tier.value,
         ','.join(sorted(f.value for f in d.flags)),
         d.status.value, d.provenance.value)
        for d in result.decisions
    ]
    with conn:
        conn.execute("DELETE FROM decisions WHERE dataset = ? AND interval_index = ?",
                     (dataset, iv.index))
        conn.execute("""
            INSERT OR REPLACE INTO intervals
                (dataset, interval_index, start_frame, end_frame, n_reference, n_stationary)
            VALUES (?,?,?,?,?,?)
        """, (dataset, iv.index, iv.start, iv.end,
              result.reference_count, result.stationary_count))
        conn.executemany("""
            INSERT INTO decisions
                (dataset, interval_index, slot, anchor_x, occupancy_fraction,
                 multiplicity, longest_gap, tier, flags, stationary, provenance)
            VALUES (?,?,?,?,?,?,?,?,?,?,?)
        """, rows)


def clear_dataset(conn: sqlite3.Connection, dataset: str) -> None:
    """Drop every saved interval of a dataset before a fresh full run."""
    with conn:
        conn.execute("DELETE FROM decisions WHERE dataset = ?", (dataset,))
        conn.execute("DELETE FROM intervals WHERE dataset = ?", (dataset,))


def read_intervals(conn: sqlite3.Connection, dataset: str) -> pd.DataFrame:
    return pd.read_sql_query(
        "SELECT * FROM intervals WHERE dataset = ? ORDER BY interval_index",
        conn, params=(dataset,)
    )


def read_decisions(conn: sqlite3.Connection, dataset: str) -> pd.DataFrame:
    return pd.read_sql_query(
        "SELECT * FROM decisions WHERE dataset = ? ORDER BY interval_index, slot",
        conn, params=(dataset,)
    )


def close_db(conn: sqlite3.Connection) -> None:
    conn.commit()
    conn.close()
