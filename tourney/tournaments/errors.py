class TournamentsError(Exception):
    pass


class ValidationError(TournamentsError):
    def __init__(self, message: str = "validation failed", *, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = list(details or [])


class NotFoundError(TournamentsError):
    pass


class DuplicateRegistrationError(TournamentsError):
    pass


class CapacityExceededError(TournamentsError):
    pass


class InvalidStateError(TournamentsError):
    pass


class AuthorizationError(TournamentsError):
    pass
