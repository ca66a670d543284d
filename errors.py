class JobError(Exception):
    """
    Base error for job operations; carries the HTTP status the API answers with.
    """
    status_code = 400

    def __init__(self, message, job_id=None):
        super().__init__(message)
        self.message = message
        self.job_id = job_id


class ValidationError(JobError):
    status_code = 400


class NotFound(JobError):
    status_code = 404

    def __init__(self, job_id):
        super().__init__("Job not found", job_id=job_id)


class InvalidState(JobError):
    status_code = 400

    def __init__(self, job_id, status, action):
        super().__init__(f"Job cannot be {action} (status={status})", job_id=job_id)
        self.status = status
        self.action = action
