"""EchoRegistrar -- 离线登记适配

不访问任何外部服务，根据任务结果计算确定性的伪交易哈希。
用于本地开发（OFFERHUB_REGISTRAR_MODE=echo）与未配置 Registrar 地址的场景。
"""

import asyncio
import hashlib

from .models import RegistrationResult, TaskOutcome


class EchoRegistrar:
    """离线 Registrar，返回 0x 前缀的 SHA-256 伪交易哈希"""

    async def record(self, outcome: TaskOutcome) -> RegistrationResult:
        # 模拟少量延迟
        await asyncio.sleep(0.01)

        digest = hashlib.sha256(
            outcome.model_dump_json().encode("utf-8")
        ).hexdigest()
        return RegistrationResult(
            transaction_hash=f"0x{digest}",
            task_id=f"echo-{outcome.project_id}",
        )

    async def health_check(self) -> bool:
        return True
