"""Registrar 包测试 fixtures"""

import pytest


@pytest.fixture
def sample_outcome():
    """标准 TaskOutcome 测试数据"""
    from offerhub.registrar.models import TaskOutcome

    return TaskOutcome(
        project_id="P1",
        freelancer_id="F1",
        client_id="C1",
        completed=True,
        outcome_description="Delivered",
    )


@pytest.fixture
def fake_sleep():
    """记录等待时长的假时钟，不真正等待"""
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep
