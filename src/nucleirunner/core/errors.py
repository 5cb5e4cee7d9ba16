"""Error taxonomy for scanner provisioning and execution.

Every fatal condition is a NucleiRunnerError subclass so callers can
stop the pipeline step with a single except clause. Non-zero scanner
exit codes are not errors; they come back as ExecutionResult values.
"""

from __future__ import annotations


class NucleiRunnerError(Exception):
    """Base class for fatal execution errors."""


class UnsupportedPlatformError(NucleiRunnerError):
    """The host OS or architecture has no matching scanner release."""


class ProvisioningError(NucleiRunnerError):
    """Downloading, verifying or installing the scanner binary failed."""


class ConfigWriteError(NucleiRunnerError):
    """The reporting configuration file could not be written."""


class ProcessLaunchError(NucleiRunnerError):
    """The scanner process could not be started."""


class RemoteExecutionError(NucleiRunnerError):
    """Dispatching work to a remote agent failed."""


class ExecutionCancelled(NucleiRunnerError):
    """The caller cancelled the execution while a process was running."""


class TemplateRefreshWarning(UserWarning):
    """Template update failed; scanning continues with cached templates."""
