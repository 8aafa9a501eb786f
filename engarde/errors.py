"""
errors.py

Error codes and the exceptions the decision engine raises when a caller
asks for a decision the current phase cannot answer.
"""
from enum import Enum


class ErrorCode(str, Enum):
    ERR_GENERIC = "ERR_GENERIC"
    ERR_INAPPLICABLE_PHASE = "ERR_INAPPLICABLE_PHASE"
    ERR_MALFORMED_HAND = "ERR_MALFORMED_HAND"
    ERR_NO_LEGAL_ACTION = "ERR_NO_LEGAL_ACTION"


class EngineError(Exception):
    def __init__(self, code: ErrorCode = ErrorCode.ERR_GENERIC, message: str = "", details: dict = None):
        super().__init__(message or code.value)
        self.code = code
        self.details = details or {}

    def to_dict(self):
        return {"code": self.code.value, "message": str(self), "details": self.details}


class InapplicablePhaseError(EngineError):
    """Raised when a phase-specific move function is called outside its phase"""
    def __init__(self, message: str = "", details: dict = None):
        super().__init__(ErrorCode.ERR_INAPPLICABLE_PHASE, message, details)


class MalformedHandError(EngineError):
    """Raised when a hand cannot be turned into per-rank counts"""
    def __init__(self, message: str = "", details: dict = None):
        super().__init__(ErrorCode.ERR_MALFORMED_HAND, message, details)
