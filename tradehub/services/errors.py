"""Domain errors raised by the account and profile services"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for service errors; carries the HTTP mapping used by the API layer"""

    status_code: int = 500
    title: str = "Internal Server Error"
    error_type: str = "internal_server_error"
    default_detail: str = "An internal server error occurred"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class BadRequestError(ServiceError):
    """Missing or unusable input"""
    status_code = 400
    title = "Bad Request"
    error_type = "bad_request"
    default_detail = "Bad request"


class InvalidCredentialsError(ServiceError):
    """Password mismatch or unusable login path"""
    status_code = 401
    title = "Unauthorized"
    error_type = "invalid_credentials"
    default_detail = "Incorrect password"


class FederatedAccountError(InvalidCredentialsError):
    """Password login attempted on an account created through Google"""
    status_code = 400
    title = "Bad Request"
    error_type = "federated_account"
    default_detail = "Login with Google"


class InvalidCodeError(ServiceError):
    """Submitted verification code does not match"""
    status_code = 400
    title = "Bad Request"
    error_type = "invalid_code"
    default_detail = "Invalid verification code"


class CodeExpiredError(ServiceError):
    """Verification code matched but its lifetime is over"""
    status_code = 400
    title = "Bad Request"
    error_type = "code_expired"
    default_detail = "Verification code expired"


class UnauthorizedError(ServiceError):
    """Missing or unusable bearer/cookie token"""
    status_code = 401
    title = "Unauthorized"
    error_type = "unauthorized"
    default_detail = "Authentication required"


class TokenExpiredError(UnauthorizedError):
    """Token signature is valid but exp has passed"""
    error_type = "token_expired"
    default_detail = "Token expired"


class TokenInvalidError(UnauthorizedError):
    """Token could not be decoded or carries no identity claim"""
    error_type = "token_invalid"
    default_detail = "Invalid token"


class NotFoundError(ServiceError):
    """Entity absent"""
    status_code = 404
    title = "Not Found"
    error_type = "not_found"
    default_detail = "Resource not found"


class ConflictError(ServiceError):
    """Entity already exists"""
    status_code = 409
    title = "Conflict"
    error_type = "conflict"
    default_detail = "Resource conflict"


class InternalError(ServiceError):
    """Unexpected persistence or storage failure"""
