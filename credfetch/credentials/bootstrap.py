"""Load the Windows credential access library, installing it on first use.

The Windows store talks to the Credential Manager through pywin32's
``win32cred`` module. When the module cannot be imported the bootstrap makes
a single attempt to install the distribution with pip, into the user site
outside a virtualenv and into the environment inside one, then imports again. Every failure is reported as a Failure carrying the
underlying error text followed by MISSING_MODULE_MESSAGE.
"""

import importlib
import site
import subprocess  # nosec B404
import sys
from collections.abc import Callable
from types import ModuleType
from typing import Any

import structlog

from credfetch.exceptions import DependencyInstallError
from credfetch.models.result import Failure, Result, Success

log = structlog.get_logger(__name__)

MISSING_MODULE_MESSAGE = "The retrieval failed. The CredentialManager module is missing."


def in_virtualenv() -> bool:
    """Whether the running interpreter belongs to a virtual environment."""
    return sys.prefix != getattr(sys, "base_prefix", sys.prefix)


class DependencyBootstrap:
    """Import a module, installing its distribution once if it is missing.

    Example:
        >>> bootstrap = DependencyBootstrap()
        >>> result = bootstrap.load()
        >>> if isinstance(result, Success):
        ...     win32cred = result.value
    """

    def __init__(
        self,
        module_name: str = "win32cred",
        package_name: str = "pywin32",
        auto_install: bool = True,
        user_install: bool = True,
        install_timeout: float = 300.0,
        runner: Callable[..., Any] = subprocess.run,
    ) -> None:
        """Initialize bootstrap.

        Args:
            module_name: Module to import
            package_name: Distribution pip installs when the import fails
            auto_install: Whether to attempt the install at all
            user_install: Install into the user site (pip --user); ignored inside a virtualenv
            install_timeout: Seconds allowed for the pip run
            runner: subprocess.run compatible callable, replaceable in tests
        """
        self.module_name = module_name
        self.package_name = package_name
        self.auto_install = auto_install
        self.user_install = user_install
        self.install_timeout = install_timeout
        self._runner = runner
        self._module: ModuleType | None = None
        self._install_attempted = False

    @property
    def installs_to_user_site(self) -> bool:
        """Whether pip gets --user; never inside a virtualenv."""
        return self.user_install and not in_virtualenv()

    def load(self) -> Result[ModuleType]:
        """Return the loaded module or the reasons it could not be loaded."""
        if self._module is not None:
            return Success(self._module)

        try:
            self._module = importlib.import_module(self.module_name)
            return Success(self._module)
        except ImportError as e:
            log.warning("dependency_missing", module=self.module_name, error=str(e))
            import_error = e

        # One install attempt per bootstrap instance
        if not self.auto_install or self._install_attempted:
            return Failure.of(str(import_error), MISSING_MODULE_MESSAGE)

        self._install_attempted = True
        try:
            self.install()
        except DependencyInstallError as e:
            log.error("dependency_install_failed", package=self.package_name, error=e.message)
            return Failure.of(e.message, MISSING_MODULE_MESSAGE)

        self._refresh_import_paths()
        try:
            self._module = importlib.import_module(self.module_name)
        except ImportError as e:
            log.error("dependency_import_after_install_failed", module=self.module_name, error=str(e))
            return Failure.of(str(e), MISSING_MODULE_MESSAGE)

        log.info("dependency_installed", package=self.package_name, module=self.module_name)
        return Success(self._module)

    def install(self) -> None:
        """Run pip once for the configured distribution.

        Raises:
            DependencyInstallError: If pip cannot be started, times out or exits non-zero
        """
        command = [sys.executable, "-m", "pip", "install", "--disable-pip-version-check"]
        if self.installs_to_user_site:
            command.append("--user")
        command.append(self.package_name)

        log.info("dependency_install_started", package=self.package_name, user=self.installs_to_user_site)
        try:
            result = self._runner(  # nosec B603
                command,
                capture_output=True,
                text=True,
                timeout=self.install_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise DependencyInstallError(
                f"Installing {self.package_name} timed out after {self.install_timeout}s",
                reference=self.package_name,
            ) from e
        except OSError as e:
            raise DependencyInstallError(
                f"Could not run pip to install {self.package_name}: {e}",
                reference=self.package_name,
            ) from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            last_line = output.splitlines()[-1] if output else f"pip exited with status {result.returncode}"
            raise DependencyInstallError(
                f"Installing {self.package_name} failed: {last_line}",
                reference=self.package_name,
                suggestion=f"Install it manually: pip install {self.package_name}",
            )

    def _refresh_import_paths(self) -> None:
        """Pick up a freshly installed distribution in this interpreter.

        pywin32 registers its DLL directories through .pth files, which are
        only processed by site.addsitedir.
        """
        importlib.invalidate_caches()
        if self.installs_to_user_site:
            site.addsitedir(site.getusersitepackages())
