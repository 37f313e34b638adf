# burncore/errors.py

# Every rejected operation raises one of these. `code` is the tag reported to
# callers and `status_code` is what the HTTP layer answers with.


class BurnEngineError(ValueError):
    """Burn engine operation rejected"""

    code: str = "burn_engine_error"
    status_code: int = 400

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.__doc__.strip()
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.code, "message": self.message}


class NotAuthorized(BurnEngineError):
    """Caller does not hold the required role"""

    code = "not_authorized"
    status_code = 403

    def __init__(self, message: str | None = None, caller: str | None = None) -> None:
        super().__init__(message)
        self.caller = caller


class Paused(BurnEngineError):
    """Burns are paused"""

    code = "paused"
    status_code = 423


class InvalidAmount(BurnEngineError):
    """Burn amount must be greater than zero"""

    code = "invalid_amount"
    status_code = 400


class CapExceeded(BurnEngineError):
    """Burn amount exceeds the per-cycle cap"""

    code = "cap_exceeded"
    status_code = 400

    def __init__(self, amount: int, cap: int) -> None:
        super().__init__(f"Burn amount {amount} exceeds per-cycle cap {cap}")
        self.amount = amount
        self.cap = cap


class InsufficientBalance(BurnEngineError):
    """Insufficient balance to burn"""

    code = "insufficient_balance"
    status_code = 402

    def __init__(self, holder: str, required: int, available: int) -> None:
        super().__init__(
            f"Insufficient balance for {holder}: required {required}, available {available}"
        )
        self.holder = holder
        self.required = required
        self.available = available
