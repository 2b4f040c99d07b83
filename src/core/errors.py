"""
Errors — Иерархия исключений temporal-streams

Все ошибки конфигурации обнаруживаются синхронно при построении
последовательности и никогда не повторяются (fail fast).

Исчерпание последовательности ошибкой НЕ является:
- try_advance() возвращает False
- __next__() поднимает StopIteration
- try_split() возвращает None
"""


class TemporalSequenceError(Exception):
    """Базовый класс всех ошибок temporal-streams."""

    pass


class InvalidSequenceConfigurationError(TemporalSequenceError, ValueError):
    """
    Невалидная конфигурация последовательности.

    Возникает при:
    1. None вместо start / end / step
    2. Шаге без единой ненулевой единицы
    3. Начальной и конечной точках из разных доменов
    4. Домене, не поддерживающем наименьшую единицу шага
    5. Незаполненных параметрах builder'а
    """

    pass


class UnsupportedTemporalUnitError(TemporalSequenceError, ValueError):
    """
    Домен точки не поддерживает запрошенную единицу.

    Например, прибавление часов к datetime.date или месяцев к datetime.time.
    Ядро не перехватывает эту ошибку: она пропагирует к вызывающему
    produce-next / split.
    """

    pass
