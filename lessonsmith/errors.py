class AppError(Exception):
    status_code = 500
    message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputError(AppError):
    """Request rejected before any external call."""
    status_code = 400
    message = "Invalid request."


class ParseError(AppError):
    """Generated output could not be turned into a quiz."""
    status_code = 502
    message = "Failed to generate quiz. Please try again."


class ExternalServiceError(AppError):
    status_code = 502
    message = "The generation service failed. Please try again."


class ValidationError(AppError):
    """Answer missing where the quiz needs one before moving on."""
    status_code = 400
    message = "Please enter an answer before proceeding."


class QuizStateError(AppError):
    status_code = 409
    message = "That action is not available right now."


class SessionNotFound(AppError):
    status_code = 404
    message = "Quiz session not found."
