"""
Error taxonomy
Every error carries the HTTP status it is answered with.
"""


class VeriVaultError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, status_code=None, payload=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}

    def to_dict(self):
        body = {'success': False, 'message': self.message}
        body.update(self.payload)
        return body


class MissingFieldError(VeriVaultError):
    status_code = 400
    default_message = 'Required fields missing'


class InvalidReportTypeError(VeriVaultError):
    status_code = 400
    default_message = 'Invalid report type'


class InvalidPinFormatError(VeriVaultError):
    status_code = 400
    default_message = 'PIN must be exactly 4 digits'


class UploadRejectedError(VeriVaultError):
    status_code = 400
    default_message = 'File upload rejected'


class AuthenticationError(VeriVaultError):
    status_code = 401
    default_message = 'Authentication failed'


class NotFoundError(VeriVaultError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(VeriVaultError):
    status_code = 409
    default_message = 'Conflict'


class RenderError(VeriVaultError):
    status_code = 500
    default_message = 'Error generating report'


class AIServiceError(VeriVaultError):
    status_code = 500
    default_message = 'AI analysis service error'
