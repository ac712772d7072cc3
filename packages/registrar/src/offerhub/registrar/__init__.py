"""Offer Hub Registrar -- 链上任务登记抽象层

packages/registrar 的公开接口导出。
"""

# 核心组件
from .client import HttpRegistrarClient

# 配置
from .config import RegistrarConfig, build_registrar, load_registrar_config
from .echo_registrar import EchoRegistrar

# 异常
from .exceptions import RegistrarError, RegistrarUnreachableError
from .models import RegistrationOutcome, RegistrationResult, TaskOutcome
from .retry import RetryingRegistrar

__all__ = [
    "TaskOutcome",
    "RegistrationResult",
    "RegistrationOutcome",
    "HttpRegistrarClient",
    "EchoRegistrar",
    "RetryingRegistrar",
    "RegistrarConfig",
    "load_registrar_config",
    "build_registrar",
    "RegistrarError",
    "RegistrarUnreachableError",
]
