"""TaskRecordStore / ProjectStore 单元测试

测试内容：
1. 插入与点查询，查无此行返回 None
2. 同一 project_id 重复插入抛 DuplicateRecordError
3. 列表查询按 created_at 倒序
4. 评分条件更新只生效一次
5. 项目状态条件更新
"""

from datetime import UTC, datetime, timedelta

import pytest
from offerhub.core.exceptions import DuplicateRecordError, StoreError
from offerhub.core.models import ProjectStatus, TaskRecord


def _record(
    record_id: str,
    project_id: str,
    client_id: str = "C1",
    freelancer_id: str = "F1",
    completed: bool = True,
    created_at: datetime | None = None,
) -> TaskRecord:
    ts = created_at or datetime.now(UTC)
    return TaskRecord(
        id=record_id,
        project_id=project_id,
        freelancer_id=freelancer_id,
        client_id=client_id,
        completed=completed,
        outcome_description="delivered",
        on_chain_tx_hash="0xabc",
        on_chain_task_id="chain-1",
        created_at=ts,
        updated_at=ts,
    )


class TestTaskRecordInsertAndGet:
    async def test_insert_returns_stored_record(self, stores, make_project):
        project_store, record_store, _ = stores
        await project_store.create_project(make_project("P1"))

        stored = await record_store.insert_task_record(_record("R1", "P1"))

        assert stored.id == "R1"
        assert stored.completed is True
        assert stored.on_chain_tx_hash == "0xabc"
        assert stored.rating is None

    async def test_insert_returns_model_without_reading_back(
        self, stores, make_project, monkeypatch
    ):
        """提交成功后直接返回写入的模型，点查询失败不影响插入结果"""
        project_store, record_store, _ = stores
        await project_store.create_project(make_project("P1"))
        record = _record("R1", "P1")

        async def _failing_get(record_id):
            raise StoreError("read failed")

        monkeypatch.setattr(record_store, "get_task_record_by_id", _failing_get)

        stored = await record_store.insert_task_record(record)

        assert stored == record
        found = await record_store.get_task_record_by_project_id("P1")
        assert found is not None
        assert found.id == "R1"

    async def test_get_missing_returns_none(self, stores):
        _, record_store, _ = stores
        assert await record_store.get_task_record_by_id("missing") is None
        assert await record_store.get_task_record_by_project_id("missing") is None

    async def test_get_by_project_id(self, stores, make_project):
        project_store, record_store, _ = stores
        await project_store.create_project(make_project("P1"))
        await record_store.insert_task_record(_record("R1", "P1", completed=False))

        found = await record_store.get_task_record_by_project_id("P1")
        assert found is not None
        assert found.id == "R1"
        assert found.completed is False

    async def test_duplicate_project_raises_duplicate_error(self, stores, make_project):
        """唯一索引拦截同一项目的第二条记录，首条记录不受影响"""
        project_store, record_store, _ = stores
        await project_store.create_project(make_project("P1"))
        await record_store.insert_task_record(_record("R1", "P1"))

        with pytest.raises(DuplicateRecordError):
            await record_store.insert_task_record(_record("R2", "P1"))

        found = await record_store.get_task_record_by_project_id("P1")
        assert found.id == "R1"

    async def test_unknown_project_raises_store_error(self, stores):
        """外键约束失败不是重复记录"""
        _, record_store, _ = stores
        with pytest.raises(StoreError) as exc_info:
            await record_store.insert_task_record(_record("R1", "NOPE"))
        assert not isinstance(exc_info.value, DuplicateRecordError)


class TestTaskRecordListing:
    async def test_list_by_client_newest_first(self, stores, make_project):
        project_store, record_store, _ = stores
        base = datetime(2024, 1, 1, tzinfo=UTC)
        for i in range(3):
            await project_store.create_project(make_project(f"P{i}"))
            await record_store.insert_task_record(
                _record(f"R{i}", f"P{i}", created_at=base + timedelta(days=i))
            )

        records = await record_store.list_task_records_by_client("C1")
        assert [r.id for r in records] == ["R2", "R1", "R0"]

    async def test_list_by_freelancer_filters(self, stores, make_project):
        project_store, record_store, _ = stores
        await project_store.create_project(make_project("P1"))
        await project_store.create_project(make_project("P2"))
        await record_store.insert_task_record(_record("R1", "P1", freelancer_id="F1"))
        await record_store.insert_task_record(_record("R2", "P2", freelancer_id="F2"))

        records = await record_store.list_task_records_by_freelancer("F2")
        assert [r.id for r in records] == ["R2"]

    async def test_list_returns_every_record(self, stores, make_project):
        """列表查询不截断：全部记录按 created_at 倒序返回"""
        project_store, record_store, _ = stores
        base = datetime(2024, 1, 1, tzinfo=UTC)
        total = 600
        for i in range(total):
            await project_store.create_project(make_project(f"P{i:04d}"))
            await record_store.insert_task_record(
                _record(f"R{i:04d}", f"P{i:04d}", created_at=base + timedelta(minutes=i))
            )

        by_client = await record_store.list_task_records_by_client("C1")
        by_freelancer = await record_store.list_task_records_by_freelancer("F1")

        assert len(by_client) == total
        assert len(by_freelancer) == total
        assert by_client[0].id == f"R{total - 1:04d}"
        assert by_client[-1].id == "R0000"

    async def test_list_empty(self, stores):
        _, record_store, _ = stores
        assert await record_store.list_task_records_by_client("nobody") == []
        assert await record_store.list_task_records_by_freelancer("nobody") == []


class TestTaskRecordUpdate:
    async def test_rating_conditional_update_applies_once(self, stores, make_project):
        project_store, record_store, _ = stores
        await project_store.create_project(make_project("P1"))
        await record_store.insert_task_record(_record("R1", "P1"))
        now = datetime.now(UTC).isoformat()

        first = await record_store.update_task_record(
            "R1",
            {"rating": 5, "rating_comment": "Great work", "updated_at": now},
            require_unrated=True,
        )
        second = await record_store.update_task_record(
            "R1", {"rating": 1, "updated_at": now}, require_unrated=True
        )

        assert first is not None
        assert first.rating == 5
        assert first.rating_comment == "Great work"
        assert second is None
        stored = await record_store.get_task_record_by_id("R1")
        assert stored.rating == 5

    async def test_update_rejects_unknown_fields(self, stores):
        _, record_store, _ = stores
        with pytest.raises(ValueError):
            await record_store.update_task_record("R1", {"completed": 0})

    async def test_rating_check_constraint(self, stores, make_project):
        project_store, record_store, _ = stores
        await project_store.create_project(make_project("P1"))
        await record_store.insert_task_record(_record("R1", "P1"))

        with pytest.raises(StoreError):
            await record_store.update_task_record("R1", {"rating": 9})


class TestProjectStore:
    async def test_get_project(self, stores, make_project):
        project_store, _, _ = stores
        await project_store.create_project(make_project("P1", status="open"))

        project = await project_store.get_project("P1")
        assert project.status == ProjectStatus.OPEN
        assert project.client_id == "C1"
        assert await project_store.get_project("missing") is None

    async def test_conditional_status_update(self, stores, make_project):
        project_store, _, _ = stores
        await project_store.create_project(make_project("P1"))
        now = datetime.now(UTC).isoformat()

        applied = await project_store.update_project_status(
            "P1", ProjectStatus.COMPLETED, now, expected_status=ProjectStatus.IN_PROGRESS
        )
        repeated = await project_store.update_project_status(
            "P1", ProjectStatus.CANCELLED, now, expected_status=ProjectStatus.IN_PROGRESS
        )

        assert applied is True
        assert repeated is False
        project = await project_store.get_project("P1")
        assert project.status == ProjectStatus.COMPLETED


class TestStoreGroup:
    async def test_create_store_group_enables_wal(self, tmp_path):
        from offerhub.core.store import create_store_group
        from offerhub.core.store.sqlite_init import verify_wal_mode

        group = await create_store_group(str(tmp_path / "nested" / "offerhub.db"))
        try:
            assert await verify_wal_mode(group.conn) is True
            assert await group.project_store.get_project("P1") is None
            assert await group.task_record_store.list_task_records_by_client("C1") == []
        finally:
            await group.conn.close()
