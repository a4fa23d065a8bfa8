from typing import Any, Optional


class CarrierError(Exception):
    """Base exception for logistics provider failures"""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class CarrierAuthError(CarrierError):
    """Raised when credentials are rejected or the session token is no longer valid"""
    pass


class CarrierRequestError(CarrierError):
    """Raised for non-2xx responses, network failures and provider-side rejections"""
    pass


class ServiceabilityError(CarrierError):
    """Raised when no courier serves the pickup/delivery pincode pair"""
    pass
