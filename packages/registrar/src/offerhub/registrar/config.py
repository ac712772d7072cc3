"""RegistrarConfig -- Registrar 配置加载

从环境变量加载配置，不硬编码服务地址。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr, ValidationError

from .retry import DEFAULT_BACKOFF_BASE_S, DEFAULT_MAX_ATTEMPTS

log = structlog.get_logger()


class RegistrarConfig(BaseModel):
    """Registrar 包配置 -- 从环境变量加载

    环境变量:
        REGISTRAR_URL: 登记服务地址（默认 http://localhost:8545）
        REGISTRAR_API_KEY: 访问密钥
        OFFERHUB_REGISTRAR_MODE: 运行模式（http/echo）
        OFFERHUB_REGISTRAR_TIMEOUT_S: 单次调用超时（秒，默认 30）
        OFFERHUB_REGISTRAR_MAX_ATTEMPTS: 总尝试次数（默认 3）
        OFFERHUB_REGISTRAR_BACKOFF_BASE_S: 退避底数（秒，默认 2）
    """

    base_url: str = Field(
        default="http://localhost:8545",
        description="登记服务基础 URL",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="登记服务访问密钥",
    )
    mode: Literal["http", "echo"] = Field(
        default="http",
        description="运行模式：http / echo",
    )
    timeout_s: int = Field(default=30, ge=1, description="单次调用超时（秒）")
    max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        ge=1,
        description="总尝试次数（含首次）",
    )
    backoff_base_s: float = Field(
        default=DEFAULT_BACKOFF_BASE_S,
        ge=0,
        description="指数退避底数（秒）",
    )


def _read_number(env_var: str, cast, kwargs: dict, key: str) -> None:
    """读取数值型环境变量

    无法解析或超出字段约束（如 max_attempts=0）时记录警告并保留默认值。
    """
    val = os.environ.get(env_var)
    if not val:
        return
    try:
        value = cast(val)
        RegistrarConfig(**{key: value})
    except (ValueError, ValidationError):
        default = RegistrarConfig.model_fields[key].default
        log.warning(
            "invalid_registrar_config",
            env_var=env_var,
            value=val,
            fallback=default,
        )
        return
    kwargs[key] = value


def load_registrar_config() -> RegistrarConfig:
    """从环境变量加载 Registrar 配置

    Returns:
        RegistrarConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("REGISTRAR_URL"):
        kwargs["base_url"] = val

    if val := os.environ.get("REGISTRAR_API_KEY"):
        kwargs["api_key"] = SecretStr(val)

    if val := os.environ.get("OFFERHUB_REGISTRAR_MODE"):
        kwargs["mode"] = val

    _read_number("OFFERHUB_REGISTRAR_TIMEOUT_S", int, kwargs, "timeout_s")
    _read_number("OFFERHUB_REGISTRAR_MAX_ATTEMPTS", int, kwargs, "max_attempts")
    _read_number("OFFERHUB_REGISTRAR_BACKOFF_BASE_S", float, kwargs, "backoff_base_s")

    return RegistrarConfig(**kwargs)


def build_registrar(config: RegistrarConfig):
    """根据配置创建 registrar 实例"""
    if config.mode == "echo":
        from .echo_registrar import EchoRegistrar

        return EchoRegistrar()

    from .client import HttpRegistrarClient

    return HttpRegistrarClient(
        base_url=config.base_url,
        api_key=config.api_key.get_secret_value(),
        timeout_s=config.timeout_s,
    )
