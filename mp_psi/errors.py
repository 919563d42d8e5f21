class PSIError(Exception):
    """Базовая ошибка протокола PSI"""


class ConfigurationError(PSIError, ValueError):
    """Несогласованные параметры: число корзин, длина вектора, параметры BFV"""


class MalformedMessageError(PSIError, ValueError):
    """Сообщение не прошло декодирование или структурную проверку"""


class SessionMismatchError(MalformedMessageError):
    """Сообщение относится к другому запуску протокола"""


class RandomnessExhaustedError(PSIError, RuntimeError):
    """Криптографически стойкий источник случайности недоступен"""


class StateError(PSIError, RuntimeError):
    """Неверное использование состояния стороны"""


class StateReuseError(StateError):
    """Состояние уже было использовано одним из переходов"""


class NotInitializedError(StateError):
    """Среда выполнения не инициализирована"""
