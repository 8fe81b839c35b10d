"""
SQLite persistence for analysis runs.

Stores runs, scored leads, and the competitor cohort each lead was scored
against. Every run is kept separately; the same business analyzed twice is
stored twice.
"""

import os
import sqlite3
import json
import uuid
import logging
from typing import Dict, List, Optional, Sequence
from datetime import datetime, timezone

from .config import get_settings
from .models import CompetitorRecord, Lead

logger = logging.getLogger(__name__)


def get_db_path() -> str:
    """Return path to SQLite DB file (PROSPECTOR_DB_PATH, default data/prospector.db)."""
    path = get_settings().db_path
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return path


def _get_conn() -> sqlite3.Connection:
    """Get connection with row factory for dict-like rows."""
    conn = sqlite3.connect(get_db_path())
    conn.row_factory = sqlite3.Row
    return conn


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def init_db() -> None:
    """Create tables if they do not exist."""
    conn = _get_conn()
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS runs (
                id TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                config TEXT,
                leads_count INTEGER DEFAULT 0,
                status TEXT NOT NULL DEFAULT 'running',
                run_stats TEXT
            );

            CREATE TABLE IF NOT EXISTS leads (
                id TEXT PRIMARY KEY,
                run_id TEXT NOT NULL,
                place_id TEXT,
                name TEXT NOT NULL,
                address TEXT,
                rating REAL,
                review_count INTEGER,
                tier TEXT,
                gap_analysis TEXT,
                latitude REAL,
                longitude REAL,
                incomplete_data INTEGER DEFAULT 0,
                source TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (run_id) REFERENCES runs(id)
            );

            CREATE TABLE IF NOT EXISTS competitors (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                lead_id TEXT NOT NULL,
                name TEXT NOT NULL,
                rating REAL,
                review_count INTEGER,
                distance_m REAL DEFAULT 0,
                place_id TEXT,
                position INTEGER NOT NULL,
                FOREIGN KEY (lead_id) REFERENCES leads(id)
            );

            CREATE INDEX IF NOT EXISTS idx_leads_run ON leads(run_id);
            CREATE INDEX IF NOT EXISTS idx_competitors_lead ON competitors(lead_id);
        """)
        conn.commit()
    finally:
        conn.close()


def _run_row_to_dict(row: sqlite3.Row) -> Dict:
    return {
        "id": row["id"],
        "created_at": row["created_at"],
        "config": json.loads(row["config"]) if row["config"] else None,
        "leads_count": row["leads_count"],
        "status": row["status"],
        "run_stats": json.loads(row["run_stats"]) if row["run_stats"] else None,
    }


def _lead_row_to_dict(row: sqlite3.Row) -> Dict:
    return {
        "id": row["id"],
        "run_id": row["run_id"],
        "place_id": row["place_id"],
        "name": row["name"],
        "address": row["address"],
        "rating": row["rating"],
        "review_count": row["review_count"],
        "tier": row["tier"],
        "gap_analysis": row["gap_analysis"],
        "lat": row["latitude"],
        "lng": row["longitude"],
        "incomplete_data": bool(row["incomplete_data"]),
        "source": row["source"],
        "created_at": row["created_at"],
    }


def create_run(config: Optional[Dict] = None) -> str:
    """Create a new run; return run_id (UUID)."""
    init_db()
    run_id = str(uuid.uuid4())
    config_json = json.dumps(config) if config else None
    conn = _get_conn()
    try:
        conn.execute(
            "INSERT INTO runs (id, created_at, config, status) VALUES (?, ?, ?, ?)",
            (run_id, _now(), config_json, "running")
        )
        conn.commit()
    finally:
        conn.close()
    logger.info(f"Created run {run_id[:8]}")
    return run_id


def insert_lead(run_id: str, lead: Lead) -> str:
    """Insert a scored lead; return its id."""
    conn = _get_conn()
    try:
        conn.execute(
            """INSERT INTO leads (id, run_id, place_id, name, address, rating, review_count, tier,
                                  gap_analysis, latitude, longitude, incomplete_data, source, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                lead.id,
                run_id,
                lead.place_id,
                lead.name,
                lead.address,
                lead.rating,
                lead.review_count,
                lead.tier,
                lead.gap_analysis,
                lead.lat,
                lead.lng,
                1 if lead.incomplete_data else 0,
                lead.source,
                _now(),
            )
        )
        conn.commit()
        return lead.id
    finally:
        conn.close()


def insert_competitors(lead_id: str, competitors: Sequence[CompetitorRecord]) -> int:
    """Store a lead's cohort; position keeps provider order. Returns rows written."""
    if not competitors:
        return 0
    conn = _get_conn()
    try:
        conn.executemany(
            """INSERT INTO competitors (lead_id, name, rating, review_count, distance_m, place_id, position)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            [
                (lead_id, c.name, c.rating, c.review_count, c.distance_m, c.place_id, position)
                for position, c in enumerate(competitors)
            ]
        )
        conn.commit()
        return len(competitors)
    finally:
        conn.close()


def update_run_completed(run_id: str, leads_count: int, run_stats: Optional[Dict] = None) -> None:
    """Set run status to completed, leads_count, and optional run_stats."""
    conn = _get_conn()
    try:
        conn.execute(
            "UPDATE runs SET status = ?, leads_count = ?, run_stats = ? WHERE id = ?",
            ("completed", leads_count, json.dumps(run_stats) if run_stats else None, run_id)
        )
        conn.commit()
    finally:
        conn.close()


def update_run_failed(run_id: str) -> None:
    """Set run status to failed."""
    conn = _get_conn()
    try:
        conn.execute("UPDATE runs SET status = ? WHERE id = ?", ("failed", run_id))
        conn.commit()
    finally:
        conn.close()


def get_latest_run_id() -> Optional[str]:
    """Return the most recent completed run id."""
    conn = _get_conn()
    try:
        row = conn.execute(
            "SELECT id FROM runs WHERE status = 'completed' ORDER BY created_at DESC LIMIT 1"
        ).fetchone()
        return row["id"] if row else None
    finally:
        conn.close()


def get_run(run_id: str) -> Optional[Dict]:
    """Get run by id."""
    conn = _get_conn()
    try:
        row = conn.execute("SELECT * FROM runs WHERE id = ?", (run_id,)).fetchone()
        return _run_row_to_dict(row) if row else None
    finally:
        conn.close()


def list_runs(limit: int = 50, status: Optional[str] = None) -> List[Dict]:
    """List runs, newest first. Optionally filter by status."""
    conn = _get_conn()
    try:
        if status:
            rows = conn.execute(
                "SELECT * FROM runs WHERE status = ? ORDER BY created_at DESC LIMIT ?",
                (status, limit)
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM runs ORDER BY created_at DESC LIMIT ?",
                (limit,)
            ).fetchall()
        return [_run_row_to_dict(row) for row in rows]
    finally:
        conn.close()


def list_leads(run_id: str) -> List[Dict]:
    """Leads of one run in insertion order."""
    conn = _get_conn()
    try:
        rows = conn.execute(
            "SELECT * FROM leads WHERE run_id = ? ORDER BY rowid",
            (run_id,)
        ).fetchall()
        return [_lead_row_to_dict(row) for row in rows]
    finally:
        conn.close()


def get_lead(lead_id: str) -> Optional[Dict]:
    conn = _get_conn()
    try:
        row = conn.execute("SELECT * FROM leads WHERE id = ?", (lead_id,)).fetchone()
        return _lead_row_to_dict(row) if row else None
    finally:
        conn.close()


def get_competitors_for_lead(lead_id: str) -> List[Dict]:
    """Cohort of one lead in the order it was gathered."""
    conn = _get_conn()
    try:
        rows = conn.execute(
            "SELECT * FROM competitors WHERE lead_id = ? ORDER BY position",
            (lead_id,)
        ).fetchall()
        return [
            {
                "lead_id": row["lead_id"],
                "name": row["name"],
                "rating": row["rating"],
                "review_count": row["review_count"],
                "distance_m": row["distance_m"],
                "place_id": row["place_id"],
            }
            for row in rows
        ]
    finally:
        conn.close()
