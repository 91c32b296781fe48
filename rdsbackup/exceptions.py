class RDSBackupError(Exception):
    """
    Base class for failures that end a backup run.
    """


class ConfigurationError(RDSBackupError):
    """
    Missing or invalid arguments or credentials. Raised before any AWS call.
    """


class AccountResolutionError(RDSBackupError):
    """
    The caller identity ARN could not be parsed into an account id.
    """


class SnapshotNotFound(RDSBackupError):
    """
    No usable snapshot exists for the source DB instance.
    """


class CopyInitiationError(RDSBackupError):
    """
    RDS rejected the copy request or returned an unexpected status for it.
    """


class SnapshotVanished(RDSBackupError):
    """
    The snapshot copy disappeared, or became ambiguous, while waiting for it.
    """


class CopyTimeout(RDSBackupError):
    """
    The snapshot copy did not finish within the configured maximum wait.
    """


class DeletionError(RDSBackupError):
    """
    A snapshot could not be deleted while applying the retention policy.
    """
