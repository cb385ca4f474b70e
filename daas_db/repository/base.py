"""Generic entity repositories.

A repository is configured, not subclassed: it takes an executor (an
:class:`~daas_db.core.engine.Engine` or an active transaction) and an
:class:`~daas_db.mapping.plan.EntityPlan`, and turns the five entity
operations into statements. Concrete repositories in this package hold one
and add their own queries on top.

When the repository is bound to a transaction, any failure inside an
operation rolls that transaction back before the error is re-raised.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator, Mapping
from contextlib import asynccontextmanager, contextmanager
from typing import Any, Generic, Protocol, TypeAlias, TypeVar

import structlog

from daas_db.core.engine import AsyncEngine, Engine
from daas_db.core.exceptions import ConfigurationError, StaleEntityError
from daas_db.core.query import Delete, Insert, Select, Update
from daas_db.core.transaction import AsyncTransactionManager, TransactionManager
from daas_db.mapping.joined import JoinedGroups, Row, split_rows
from daas_db.mapping.naming import CAMEL_CASE, NamingConvention
from daas_db.mapping.plan import EntityPlan

logger = structlog.get_logger()


class Entity(Protocol):
    """Anything stored in one table row with an integer primary key."""

    @property
    def id(self) -> int: ...


T = TypeVar("T", bound=Entity)

Executor: TypeAlias = Engine | TransactionManager
AsyncExecutor: TypeAlias = AsyncEngine | AsyncTransactionManager


class _PlanBinding(Generic[T]):
    """Plan-derived statements and row conversion shared by both repositories."""

    def __init__(self, db: Any, plan: EntityPlan[T], naming: NamingConvention) -> None:
        if db is None:
            raise ConfigurationError("Repository requires an engine or a transaction")
        if not isinstance(plan, EntityPlan):
            raise ConfigurationError(f"Repository requires an EntityPlan, got {plan!r}")
        self.db = db
        self.plan = plan
        self.naming = naming

    @property
    def table(self) -> str:
        return self.plan.table

    def _select_joined(self, condition: Mapping[str, Any]) -> Select:
        return Select(
            self.plan.table,
            columns=self.plan.projection,
            joins=self.plan.joins,
            where=dict(condition),
        )

    def _select_own(self, condition: Mapping[str, Any], limit: int | None, offset: int) -> Select:
        return Select(
            self.plan.table,
            columns=[f"{self.plan.table}.{column}" for column in self.plan.own_columns],
            where=dict(condition),
            limit=limit,
            offset=offset,
        )

    def _insert(self, values: Mapping[str, Any]) -> Insert:
        return Insert(self.plan.table, values, returning=("id",))

    def _update(self, entity: T, values: Mapping[str, Any]) -> Update:
        return Update(
            self.plan.table,
            values,
            where={"id": entity.id},
            returning=self.plan.own_columns,
        )

    def _delete(self, entity: T) -> Delete:
        return Delete(self.plan.table, where={"id": entity.id})

    def _build(
        self,
        row: Row,
        joins: JoinedGroups | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> T:
        return self.plan.factory(self.naming.convert_to_application(row), joins or {}, extra)

    def _build_joined(self, rows: list[Row]) -> T:
        own, joined = split_rows(rows)
        # Table keys stay storage names; only the column keys are converted
        groups = {
            table: [self.naming.convert_to_application(group) for group in table_rows]
            for table, table_rows in joined.items()
        }
        return self.plan.factory(self.naming.convert_to_application(own), groups, None)


class Repository(_PlanBinding[T]):
    """Synchronous repository for one entity plan."""

    def __init__(
        self,
        db: Executor,
        plan: EntityPlan[T],
        naming: NamingConvention = CAMEL_CASE,
    ) -> None:
        super().__init__(db, plan, naming)

    @property
    def in_transaction(self) -> bool:
        return isinstance(self.db, TransactionManager) and self.db.is_active

    def bind(self, db: Executor) -> Repository[T]:
        """Same plan and naming, different executor (e.g. a transaction)."""
        return Repository(db, self.plan, self.naming)

    def find_by_id(self, entity_id: int) -> T | None:
        return self.find_by_condition({f"{self.plan.table}.id": entity_id})

    def find_by_condition(self, condition: Mapping[str, Any]) -> T | None:
        """First entity matching equality *condition* on qualified columns, joins included."""
        with self._guard():
            rows = self.db.fetch_all(self._select_joined(condition))
            if not rows:
                return None
            return self._build_joined(rows)

    def find_all(self, limit: int | None = None, offset: int = 0) -> list[T]:
        """Own columns only, in whatever order the storage engine returns them."""
        return self.find_all_by_condition({}, limit=limit, offset=offset)

    def find_all_by_condition(
        self,
        condition: Mapping[str, Any],
        limit: int | None = None,
        offset: int = 0,
    ) -> list[T]:
        with self._guard():
            rows = self.db.fetch_all(self._select_own(condition, limit, offset))
            return [self._build(row) for row in rows]

    def insert(self, data: Mapping[str, Any], extra: Mapping[str, Any] | None = None) -> T:
        """Insert one row and build the entity from *data* plus the new id.

        The row is not read back, so storage defaults and triggers are not
        reflected in the returned entity.
        """
        with self._guard():
            values = self.naming.convert_to_storage(data)
            rows = self.db.execute_returning(self._insert(values))
            created = {**values, "id": rows[0]["id"]}
            logger.info("entity_inserted", table=self.plan.table, id=created["id"])
            return self._build(created, extra=extra)

    def update(
        self,
        entity: T,
        patch: Mapping[str, Any],
        extra: Mapping[str, Any] | None = None,
    ) -> T:
        """Write only *patch* and build a fresh entity from the returned row.

        An empty patch returns *entity* untouched without writing.
        """
        if not patch:
            logger.debug("update_skipped", table=self.plan.table, id=entity.id)
            return entity
        with self._guard():
            rows = self.db.execute_returning(
                self._update(entity, self.naming.convert_to_storage(patch))
            )
            if not rows:
                raise StaleEntityError(self.plan.table, entity.id)
            return self._build(rows[0], extra=extra)

    def delete(self, entity: T) -> None:
        with self._guard():
            self.db.execute(self._delete(entity))
            logger.info("entity_deleted", table=self.plan.table, id=entity.id)

    def commit(self) -> None:
        if self.in_transaction:
            self.db.commit()  # type: ignore[union-attr]

    def rollback(self, error: BaseException | None = None) -> None:
        if self.in_transaction:
            logger.info(
                "transaction_rolled_back",
                table=self.plan.table,
                reason=type(error).__name__ if error else None,
            )
            self.db.rollback()  # type: ignore[union-attr]

    @contextmanager
    def _guard(self) -> Iterator[None]:
        try:
            yield
        except Exception as e:
            if self.in_transaction:
                try:
                    self.rollback(e)
                except Exception as rollback_error:
                    logger.warning(
                        "rollback_failed",
                        table=self.plan.table,
                        error=str(rollback_error),
                    )
            raise


class AsyncRepository(_PlanBinding[T]):
    """Asynchronous repository for one entity plan."""

    def __init__(
        self,
        db: AsyncExecutor,
        plan: EntityPlan[T],
        naming: NamingConvention = CAMEL_CASE,
    ) -> None:
        super().__init__(db, plan, naming)

    @property
    def in_transaction(self) -> bool:
        return isinstance(self.db, AsyncTransactionManager) and self.db.is_active

    def bind(self, db: AsyncExecutor) -> AsyncRepository[T]:
        return AsyncRepository(db, self.plan, self.naming)

    async def find_by_id(self, entity_id: int) -> T | None:
        return await self.find_by_condition({f"{self.plan.table}.id": entity_id})

    async def find_by_condition(self, condition: Mapping[str, Any]) -> T | None:
        async with self._guard():
            rows = await self.db.fetch_all(self._select_joined(condition))
            if not rows:
                return None
            return self._build_joined(rows)

    async def find_all(self, limit: int | None = None, offset: int = 0) -> list[T]:
        return await self.find_all_by_condition({}, limit=limit, offset=offset)

    async def find_all_by_condition(
        self,
        condition: Mapping[str, Any],
        limit: int | None = None,
        offset: int = 0,
    ) -> list[T]:
        async with self._guard():
            rows = await self.db.fetch_all(self._select_own(condition, limit, offset))
            return [self._build(row) for row in rows]

    async def insert(self, data: Mapping[str, Any], extra: Mapping[str, Any] | None = None) -> T:
        async with self._guard():
            values = self.naming.convert_to_storage(data)
            rows = await self.db.execute_returning(self._insert(values))
            created = {**values, "id": rows[0]["id"]}
            logger.info("entity_inserted", table=self.plan.table, id=created["id"])
            return self._build(created, extra=extra)

    async def update(
        self,
        entity: T,
        patch: Mapping[str, Any],
        extra: Mapping[str, Any] | None = None,
    ) -> T:
        if not patch:
            logger.debug("update_skipped", table=self.plan.table, id=entity.id)
            return entity
        async with self._guard():
            rows = await self.db.execute_returning(
                self._update(entity, self.naming.convert_to_storage(patch))
            )
            if not rows:
                raise StaleEntityError(self.plan.table, entity.id)
            return self._build(rows[0], extra=extra)

    async def delete(self, entity: T) -> None:
        async with self._guard():
            await self.db.execute(self._delete(entity))
            logger.info("entity_deleted", table=self.plan.table, id=entity.id)

    async def commit(self) -> None:
        if self.in_transaction:
            await self.db.commit()  # type: ignore[union-attr]

    async def rollback(self, error: BaseException | None = None) -> None:
        if self.in_transaction:
            logger.info(
                "transaction_rolled_back",
                table=self.plan.table,
                reason=type(error).__name__ if error else None,
            )
            await self.db.rollback()  # type: ignore[union-attr]

    @asynccontextmanager
    async def _guard(self) -> AsyncIterator[None]:
        try:
            yield
        except Exception as e:
            if self.in_transaction:
                try:
                    await self.rollback(e)
                except Exception as rollback_error:
                    logger.warning(
                        "rollback_failed",
                        table=self.plan.table,
                        error=str(rollback_error),
                    )
            raise
