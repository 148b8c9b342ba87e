from typing import Optional


class ComplianceCheckerError(Exception):
    pass


class ComplianceAnalysisError(ComplianceCheckerError):
    """terminal failures of the LLM compliance call, raised to the immediate caller"""


class RateLimitExhausted(ComplianceAnalysisError):
    def __init__(self, message: str, attempts: int, retry_after_ms: Optional[int] = None):
        super().__init__(message)
        self.attempts = attempts
        self.retry_after_ms = retry_after_ms


class UpstreamError(ComplianceAnalysisError):
    def __init__(self, message: str, is_auth_error: bool = False):
        super().__init__(message)
        self.is_auth_error = is_auth_error


class MalformedResponse(ComplianceAnalysisError):
    def __init__(self, message: str, raw_payload: Optional[str] = None):
        super().__init__(message)
        self.raw_payload = raw_payload


class DocumentParseError(ComplianceCheckerError):
    pass


class UnsupportedDocumentType(DocumentParseError):
    def __init__(self, mime_type: str):
        super().__init__(f'Unsupported file type: {mime_type}')
        self.mime_type = mime_type
