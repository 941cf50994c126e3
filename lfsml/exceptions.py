"""
Exceptions raised by the lfsml SDK
"""

from typing import Optional


class LfsmlError(Exception):
    """Base exception for all SDK errors"""
    pass


class APIError(LfsmlError):
    """Raised when the backend returns an error response"""
    
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
    
    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class ResourceNotFoundError(APIError):
    """Raised when the requested resource does not exist (HTTP 404)"""
    
    def __init__(self, message: str = "Resource not found", response_data: Optional[dict] = None):
        super().__init__(message, status_code=404, response_data=response_data)


class TransportError(LfsmlError):
    """Raised when a request never produced an HTTP response (connection refused, timeout, ...)"""
    pass


class ValidationError(LfsmlError):
    """Raised when input is rejected locally, before any request is sent"""
    pass


class JobError(LfsmlError):
    """Base class for training job tracking errors"""
    
    def __init__(self, message: str, job_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.job_id = job_id


class JobFailedError(JobError):
    """Raised when the server reports status=failed for a job"""
    
    def __init__(self, message: str, job_id: Optional[str] = None, job=None):
        super().__init__(message, job_id=job_id)
        self.job = job


class JobConnectionLostError(JobError):
    """Raised when status polling itself broke and retries were exhausted.

    The job may still be running on the server.
    """
    
    def __init__(self, message: str, job_id: Optional[str] = None, last_job=None):
        super().__init__(message, job_id=job_id)
        self.last_job = last_job


class JobTimeoutError(JobError):
    """Raised when a job did not reach a terminal state within the requested timeout"""
    pass


class JobCancelledError(JobError):
    """Raised when tracking was cancelled by the caller"""
    pass
