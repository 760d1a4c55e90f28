# travel_pool/core/errors.py
"""
Ошибки доменного слоя.

Ядро сообщает о неудаче через отсутствие результата (None, пустой список).
Исключения поднимаются только при нарушении правил бронирования
и недопустимых переходах статусов.
"""


class BookingRejected(ValueError):
    """Заявка на поездку не может быть создана."""


class InvalidTransition(ValueError):
    """Недопустимый переход статуса."""

    def __init__(self, entity: str, current: str, new: str) -> None:
        self.entity = entity
        self.current = current
        self.new = new
        super().__init__(f"Недопустимый переход {entity}: {current} -> {new}")
