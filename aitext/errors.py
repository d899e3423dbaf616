class AiTextError(Exception):
    """Base class for errors raised by the job core."""


class InvalidInputError(AiTextError):
    pass


class JobNotFoundError(AiTextError):
    def __init__(self, job_id: str):
        super().__init__(f"Request ID {job_id} not found")
        self.job_id = job_id


class InvalidTransitionError(AiTextError):
    def __init__(self, job_id: str, current, target):
        super().__init__(f"job {job_id}: illegal transition {current.value} -> {target.value}")
        self.job_id = job_id
        self.current = current
        self.target = target


class ProviderError(AiTextError):
    """Raised by a provider when the generation call cannot produce text."""
