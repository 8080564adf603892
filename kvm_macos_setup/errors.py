from __future__ import annotations

from typing import Sequence


class ProvisionError(RuntimeError):
    """A failure that ends the run with a specific exit status."""

    exit_code = 1


class PrivilegeError(ProvisionError):
    exit_code = 1


class DirectoryError(ProvisionError):
    exit_code = 1


class LaunchError(ProvisionError):
    exit_code = 1


class OperatorInputError(ProvisionError):
    exit_code = 1


class InvalidVendorError(ProvisionError):
    # Continuing without a kvm module profile would misconfigure virtualization.
    exit_code = 2


class CommandError(RuntimeError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({returncode}): {' '.join(self.argv)}\n{stderr}".rstrip())

    @property
    def exit_code(self) -> int:
        return self.returncode if self.returncode > 0 else 1
