from __future__ import annotations


class ProvisionError(RuntimeError):
    """Fatal provisioning failure. Carries captured output of the failing tool, if any."""

    def __init__(self, message: str, *, stdout: str | None = None, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stdout = stdout or ""
        self.stderr = stderr or ""


class UsageError(ProvisionError):
    pass


class MissingDependencyError(ProvisionError):
    pass


class NoIPAddressError(ProvisionError):
    pass


class RegistrationError(ProvisionError):
    pass


class DNSMismatchError(ProvisionError):
    pass


class DirectoryWriteError(ProvisionError):
    pass


class ConfigWriteError(ProvisionError):
    pass


class ServiceRestartError(ProvisionError):
    pass


class CertDryRunError(ProvisionError):
    def __init__(self, returncode: int, *, stdout: str | None = None, stderr: str | None = None) -> None:
        super().__init__(
            f"Certificate dry run failed (certbot exit status {returncode}).",
            stdout=stdout,
            stderr=stderr,
        )
        self.returncode = returncode


class CertIssuanceError(ProvisionError):
    pass


class ActivationLinkError(ProvisionError):
    pass


class ConfigError(ProvisionError):
    pass
