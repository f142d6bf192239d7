"""
Error types for the Ticket Desk stores
Every store failure is recoverable; the view layer decides how to show it
"""


class HelpdeskError(Exception):
    """Base class for recoverable store errors"""


class ValidationError(HelpdeskError):
    """One or more fields failed validation"""

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__('; '.join(f"{field}: {message}" for field, message in self.errors.items()))


class DuplicateAccountError(HelpdeskError):
    def __init__(self, mobile):
        self.mobile = mobile
        super().__init__(f"Mobile number {mobile} is already registered")


class IncorrectCredentialError(HelpdeskError):
    pass


class NotFoundError(HelpdeskError):
    pass


class NotAuthenticatedError(HelpdeskError):
    pass


class NotifierFailure(HelpdeskError):
    pass
