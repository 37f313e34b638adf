# burncore/caps.py

from burncore.errors import CapExceeded, InvalidAmount


class SafetyCapPolicy:
    @staticmethod
    def validate(amount: int, cap: int) -> None:
        if amount <= 0:
            raise InvalidAmount()

        if amount > cap:
            raise CapExceeded(amount, cap)
