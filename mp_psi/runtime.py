"""
Явная инициализация среды выполнения.

Порядок работы: initialize() один раз, затем вызовы переходов сторон,
shutdown() при завершении. Повторная инициализация с той же конфигурацией
ничего не меняет, с другой - запрещена до вызова shutdown().
"""

import logging
import os
import threading

from mp_psi.config import PSIConfig, load_config
from mp_psi.errors import ConfigurationError, NotInitializedError

logger = logging.getLogger(__name__)


class Runtime:
    def __init__(self, config: PSIConfig):
        self.config = config

    def __repr__(self):
        return f"Runtime(bin_count={self.config.bin_count}, poly_modulus_degree={self.config.poly_modulus_degree})"


_current = None
_lock = threading.Lock()


def initialize(config=None) -> Runtime:
    """
    :param config: PSIConfig, путь к YAML или None для конфигурации по умолчанию
    """
    global _current
    if config is None or isinstance(config, (str, os.PathLike)):
        config = load_config(config)
    elif not isinstance(config, PSIConfig):
        raise ConfigurationError(f"Неподдерживаемый тип конфигурации: {type(config).__name__}")

    with _lock:
        if _current is not None:
            if _current.config == config:
                return _current
            raise ConfigurationError(
                "Среда уже инициализирована с другими параметрами, сначала вызовите shutdown()"
            )
        runtime = _current = Runtime(config)

    logger.info(
        "Инициализация: %d корзин, BFV n=%d, t=%d",
        config.bin_count, config.poly_modulus_degree, config.plain_modulus,
    )
    return runtime


def current() -> Runtime:
    runtime = _current
    if runtime is None:
        raise NotInitializedError("Среда не инициализирована, вызовите initialize()")
    return runtime


def is_initialized() -> bool:
    return _current is not None


def shutdown():
    global _current
    with _lock:
        _current = None


def resolve_config(config=None) -> PSIConfig:
    """Явно переданная конфигурация или конфигурация текущей среды"""
    if config is not None:
        return config
    return current().config
