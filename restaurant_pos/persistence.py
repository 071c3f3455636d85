"""SQLite-backed data store for tables, menu, orders and users."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Iterator
from uuid import uuid4

from restaurant_pos.cart import money
from restaurant_pos.config import DB_PATH
from restaurant_pos.constant import (
    DEFAULT_MENU,
    DEFAULT_TABLE_COUNT,
    ORDER_STATUS_TRANSITIONS,
    ROLES,
    SEAT_COUNT_OVERRIDES,
    TABLE_STATUS_TRANSITIONS,
)
from restaurant_pos.errors import CollaboratorError, ValidationError
from restaurant_pos.models import MenuItem, Order, OrderLine, Table, UserAccount

logger = logging.getLogger(__name__)

# Collections whose writes are announced through the revisions table.
WATCHED_ENTITIES: tuple[str, ...] = ("tables", "orders", "users")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_cents(amount: Decimal) -> int:
    return int(money(amount) * 100)


def from_cents(cents: int) -> Decimal:
    return money(Decimal(cents) / 100)


def order_total(lines: Iterable[OrderLine]) -> Decimal:
    return money(sum((line.subtotal for line in lines), Decimal("0")))


class SqliteStore:
    """Service of record for the POS, one short-lived connection per call."""

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and wrap sqlite failures."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as exc:
            raise CollaboratorError(f"Database unavailable: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            with conn:
                yield conn
        except sqlite3.Error as exc:
            logger.warning("store_failure path=%s error=%r", self.db_path, exc)
            raise CollaboratorError(f"Data store error: {exc}") from exc
        finally:
            conn.close()

    def bootstrap_schema(self) -> None:
        """Create persistence schema if it does not already exist."""
        with self.connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    username TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    role TEXT NOT NULL DEFAULT 'waiter',
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                );

                CREATE TABLE IF NOT EXISTS restaurant_tables (
                    id INTEGER PRIMARY KEY,
                    seat_count INTEGER NOT NULL DEFAULT 4,
                    status TEXT NOT NULL DEFAULT 'available',
                    updated_at TEXT
                );

                CREATE TABLE IF NOT EXISTS menu_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    price_cents INTEGER NOT NULL CHECK (price_cents >= 0),
                    category TEXT NOT NULL,
                    available INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS orders (
                    id TEXT PRIMARY KEY,
                    table_id INTEGER NOT NULL,
                    total_cents INTEGER NOT NULL,
                    status TEXT NOT NULL DEFAULT 'active',
                    submitted_by TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT,
                    FOREIGN KEY(table_id) REFERENCES restaurant_tables(id),
                    FOREIGN KEY(submitted_by) REFERENCES users(id) ON DELETE SET NULL
                );

                CREATE TABLE IF NOT EXISTS order_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    order_id TEXT NOT NULL,
                    line_index INTEGER NOT NULL,
                    menu_item_id INTEGER NOT NULL,
                    item_name TEXT NOT NULL,
                    quantity INTEGER NOT NULL CHECK (quantity >= 1),
                    price_cents INTEGER NOT NULL,
                    FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE,
                    FOREIGN KEY(menu_item_id) REFERENCES menu_items(id)
                );

                CREATE TABLE IF NOT EXISTS revisions (
                    entity TEXT PRIMARY KEY,
                    revision INTEGER NOT NULL DEFAULT 0
                );

                CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
                    ON order_items(order_id, line_index);

                CREATE INDEX IF NOT EXISTS idx_orders_created_at
                    ON orders(created_at);
                """
            )

    def seed_defaults(self) -> None:
        """Insert the default floor plan and menu when they are empty."""
        now = _utc_now_iso()
        with self.connect() as conn:
            if conn.execute("SELECT COUNT(*) FROM restaurant_tables").fetchone()[0] == 0:
                conn.executemany(
                    "INSERT INTO restaurant_tables (id, seat_count, status, updated_at) VALUES (?, ?, 'available', ?)",
                    [
                        (table_id, SEAT_COUNT_OVERRIDES.get(table_id, 4), now)
                        for table_id in range(1, DEFAULT_TABLE_COUNT + 1)
                    ],
                )
                self._bump(conn, "tables")
                logger.info("seeded_tables count=%s", DEFAULT_TABLE_COUNT)
            if conn.execute("SELECT COUNT(*) FROM menu_items").fetchone()[0] == 0:
                conn.executemany(
                    "INSERT INTO menu_items (name, price_cents, category, available, created_at) VALUES (?, ?, ?, 1, ?)",
                    [(item["name"], item["price_cents"], item["category"], now) for item in DEFAULT_MENU],
                )
                logger.info("seeded_menu count=%s", len(DEFAULT_MENU))

    # Change tracking

    def _bump(self, conn: sqlite3.Connection, entity: str) -> None:
        conn.execute(
            """
            INSERT INTO revisions (entity, revision) VALUES (?, 1)
            ON CONFLICT(entity) DO UPDATE SET revision = revision + 1
            """,
            (entity,),
        )

    def revisions(self) -> dict[str, int]:
        """Current revision per watched collection."""
        with self.connect() as conn:
            rows = conn.execute("SELECT entity, revision FROM revisions").fetchall()
        found = {row["entity"]: int(row["revision"]) for row in rows}
        return {entity: found.get(entity, 0) for entity in WATCHED_ENTITIES}

    # Tables

    def list_tables(self) -> list[Table]:
        with self.connect() as conn:
            rows = conn.execute("SELECT id, seat_count, status FROM restaurant_tables ORDER BY id").fetchall()
        return [Table(id=int(row["id"]), status=row["status"], seat_count=int(row["seat_count"])) for row in rows]

    def update_table_status(self, table_id: int, status: str) -> None:
        """Reserve or release a table; occupying happens only through ``place_order``."""
        with self.connect() as conn:
            row = conn.execute("SELECT status FROM restaurant_tables WHERE id = ?", (table_id,)).fetchone()
            if row is None:
                raise ValidationError(f"Table {table_id} does not exist")
            current = row["status"]
            if status not in TABLE_STATUS_TRANSITIONS.get(current, set()):
                raise ValidationError(f"Table {table_id} cannot go from {current} to {status}")
            conn.execute(
                "UPDATE restaurant_tables SET status = ?, updated_at = ? WHERE id = ?",
                (status, _utc_now_iso(), table_id),
            )
            self._bump(conn, "tables")
        logger.info("table_status table_id=%s %s->%s", table_id, current, status)

    # Menu

    def list_menu_items(self, available: bool = True) -> list[MenuItem]:
        query = "SELECT id, name, price_cents, category FROM menu_items"
        if available:
            query += " WHERE available = 1"
        query += " ORDER BY category, id"
        with self.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [
            MenuItem(
                id=int(row["id"]),
                name=row["name"],
                price=from_cents(int(row["price_cents"])),
                category=row["category"],
            )
            for row in rows
        ]

    # Orders

    def list_orders(self) -> list[Order]:
        """All orders, newest first, with nested lines and submitter name."""
        with self.connect() as conn:
            order_rows = conn.execute(
                """
                SELECT o.id, o.table_id, o.total_cents, o.status, o.created_at, o.submitted_by, u.username
                FROM orders o
                LEFT JOIN users u ON u.id = o.submitted_by
                ORDER BY o.created_at DESC, o.id
                """
            ).fetchall()
            line_rows = conn.execute(
                """
                SELECT order_id, menu_item_id, item_name, quantity, price_cents
                FROM order_items
                ORDER BY order_id, line_index
                """
            ).fetchall()

        lines_by_order: dict[str, list[OrderLine]] = {}
        for row in line_rows:
            lines_by_order.setdefault(row["order_id"], []).append(
                OrderLine(
                    menu_item_id=int(row["menu_item_id"]),
                    name=row["item_name"],
                    quantity=int(row["quantity"]),
                    unit_price=from_cents(int(row["price_cents"])),
                )
            )

        return [
            Order(
                id=row["id"],
                table_id=int(row["table_id"]),
                lines=tuple(lines_by_order.get(row["id"], [])),
                total=from_cents(int(row["total_cents"])),
                status=row["status"],
                created_at=datetime.fromisoformat(row["created_at"]),
                submitted_by=row["submitted_by"],
                submitted_by_name=row["username"],
            )
            for row in order_rows
        ]

    def create_order(
        self,
        table_id: int,
        lines: Iterable[OrderLine],
        total: Decimal,
        submitter_id: str | None = None,
    ) -> Order:
        """Insert an order without touching the table status."""
        copied_lines = tuple(lines)
        with self.connect() as conn:
            order = self._insert_order(conn, table_id, copied_lines, total, submitter_id)
            self._bump(conn, "orders")
        return order

    def place_order(self, table_id: int, lines: Iterable[OrderLine], submitter_id: str | None = None) -> Order:
        """Create the order and occupy its table in a single transaction."""
        copied_lines = tuple(lines)
        total = order_total(copied_lines)
        with self.connect() as conn:
            order = self._insert_order(conn, table_id, copied_lines, total, submitter_id)
            cur = conn.execute(
                "UPDATE restaurant_tables SET status = 'occupied', updated_at = ? WHERE id = ? AND status = 'available'",
                (_utc_now_iso(), table_id),
            )
            if cur.rowcount != 1:
                raise ValidationError(f"Table {table_id} is no longer available")
            self._bump(conn, "orders")
            self._bump(conn, "tables")
        logger.info("order_placed order_id=%s table_id=%s total=%s lines=%s", order.id, table_id, total, len(copied_lines))
        return order

    def _insert_order(
        self,
        conn: sqlite3.Connection,
        table_id: int,
        lines: tuple[OrderLine, ...],
        total: Decimal,
        submitter_id: str | None,
    ) -> Order:
        if not lines:
            raise ValidationError("Cannot save an empty order")
        if money(total) != order_total(lines):
            raise ValidationError(f"Order total {total} does not match its lines")

        order_id = uuid4().hex
        created_at = _utc_now_iso()
        conn.execute(
            """
            INSERT INTO orders (id, table_id, total_cents, status, submitted_by, created_at, updated_at)
            VALUES (?, ?, ?, 'active', ?, ?, ?)
            """,
            (order_id, table_id, to_cents(total), submitter_id, created_at, created_at),
        )
        self._insert_lines(conn, order_id, lines)
        return Order(
            id=order_id,
            table_id=table_id,
            lines=lines,
            total=money(total),
            status="active",
            created_at=datetime.fromisoformat(created_at),
            submitted_by=submitter_id,
        )

    def _insert_lines(self, conn: sqlite3.Connection, order_id: str, lines: tuple[OrderLine, ...]) -> None:
        for idx, line in enumerate(lines):
            if line.quantity < 1:
                raise ValidationError(f"Quantity for {line.name} must be at least 1")
            conn.execute(
                """
                INSERT INTO order_items (order_id, line_index, menu_item_id, item_name, quantity, price_cents)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (order_id, idx, line.menu_item_id, line.name, line.quantity, to_cents(line.unit_price)),
            )

    def update_order_status(self, order_id: str, status: str) -> None:
        with self.connect() as conn:
            current = self._order_status(conn, order_id)
            if status not in ORDER_STATUS_TRANSITIONS.get(current, set()):
                raise ValidationError(f"Order cannot go from {current} to {status}")
            conn.execute(
                "UPDATE orders SET status = ?, updated_at = ? WHERE id = ?",
                (status, _utc_now_iso(), order_id),
            )
            self._bump(conn, "orders")
        logger.info("order_status order_id=%s %s->%s", order_id, current, status)

    def replace_order_lines(self, order_id: str, lines: Iterable[OrderLine]) -> Decimal:
        """Swap an open order's lines and persist the recomputed total."""
        copied_lines = tuple(lines)
        if not copied_lines:
            raise ValidationError("An order needs at least one line")
        total = order_total(copied_lines)
        with self.connect() as conn:
            current = self._order_status(conn, order_id)
            if current not in {"active", "preparing"}:
                raise ValidationError(f"Cannot change lines of a {current} order")
            conn.execute("DELETE FROM order_items WHERE order_id = ?", (order_id,))
            self._insert_lines(conn, order_id, copied_lines)
            conn.execute(
                "UPDATE orders SET total_cents = ?, updated_at = ? WHERE id = ?",
                (to_cents(total), _utc_now_iso(), order_id),
            )
            self._bump(conn, "orders")
        return total

    def _order_status(self, conn: sqlite3.Connection, order_id: str) -> str:
        row = conn.execute("SELECT status FROM orders WHERE id = ?", (order_id,)).fetchone()
        if row is None:
            raise ValidationError(f"Order {order_id[:8]} does not exist")
        return row["status"]

    # Users

    def list_users(self) -> list[UserAccount]:
        with self.connect() as conn:
            rows = conn.execute("SELECT id, username, role, created_at FROM users ORDER BY username").fetchall()
        return [
            UserAccount(id=row["id"], username=row["username"], role=row["role"], created_at=row["created_at"])
            for row in rows
        ]

    def update_user_role(self, user_id: str, role: str) -> None:
        if role not in ROLES:
            raise ValidationError(f"Unknown role {role!r}")
        with self.connect() as conn:
            cur = conn.execute(
                "UPDATE users SET role = ?, updated_at = ? WHERE id = ?",
                (role, _utc_now_iso(), user_id),
            )
            if cur.rowcount != 1:
                raise ValidationError("User does not exist")
            self._bump(conn, "users")
        logger.info("user_role user_id=%s role=%s", user_id, role)

    def insert_user(self, username: str, password_hash: str, role: str = "waiter") -> UserAccount:
        user_id = uuid4().hex
        created_at = _utc_now_iso()
        with self.connect() as conn:
            conn.execute(
                "INSERT INTO users (id, username, password_hash, role, created_at) VALUES (?, ?, ?, ?, ?)",
                (user_id, username, password_hash, role, created_at),
            )
            self._bump(conn, "users")
        return UserAccount(id=user_id, username=username, role=role, created_at=created_at)

    def find_user_credentials(self, username: str) -> sqlite3.Row | None:
        with self.connect() as conn:
            return conn.execute(
                "SELECT id, username, password_hash, role FROM users WHERE username = ?",
                (username,),
            ).fetchone()

    def count_users(self) -> int:
        with self.connect() as conn:
            return int(conn.execute("SELECT COUNT(*) FROM users").fetchone()[0])
