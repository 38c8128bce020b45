# artisan_cart/domain/errors.py


class RemoteCallError(Exception):
    """Nieudane wywolanie backendu marketplace (blad transportu albo odpowiedz spoza 2xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
