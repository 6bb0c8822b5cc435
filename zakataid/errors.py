"""Domain errors raised by the zakat calculation core and services."""


class ZakatError(Exception):
    """Base error for recoverable calculation problems.

    The API reports these as JSON with the error class name as ``code``.
    """

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        data = {'error': self.message, 'code': self.code}
        if self.field is not None:
            data['field'] = self.field
        return data


class InvalidAmount(ZakatError):
    """Amount is negative or not a finite number."""


class CurrencyMismatch(ZakatError):
    """Inputs were declared in different currencies."""


class InvalidThreshold(ZakatError):
    """Nisab threshold is not positive."""


class UnknownCategory(ZakatError):
    """Asset or deduction category is not recognised."""


class UnsupportedCurrency(ZakatError):
    """Currency code is not one the app prices."""


class InvalidNisabBasis(ZakatError):
    """Nisab basis is not reference, gold or silver."""


class InvalidField(ZakatError):
    """A non-monetary field (label, year, paid flag) has the wrong shape."""


class CalculationNotFound(ZakatError):
    status_code = 404

    def __init__(self, calculation_id):
        super().__init__('Calculation not found.')
        self.calculation_id = calculation_id
