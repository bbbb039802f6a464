class AppError(Exception):
    """Failure with a fixed message that is safe to show to the user"""
    message = "Something went wrong."
    status_code = 400

    def __init__(self, message=None, status_code=None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class EmailAlreadyUsed(AppError):
    message = "Email already used."
    status_code = 200


class InvalidCredentials(AppError):
    # Same text for unknown email and wrong password
    message = "Invalid credentials."
    status_code = 200


class PredictionServiceError(AppError):
    """The prediction service was unreachable or answered with an unexpected shape"""
    status_code = 502

    def __init__(self, mode, reason):
        self.mode = mode
        self.reason = reason
        super().__init__(f"{mode.capitalize()} mode error.")
