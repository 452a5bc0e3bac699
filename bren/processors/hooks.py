"""Post-rename hook execution."""

import os
import subprocess
from pathlib import Path

from bren.errors import ConfigurationError, HookError


def check_hook(script: Path) -> None:
    """Make sure the hook points at an executable file.

    Raises:
        ConfigurationError: If the script is missing or not executable.
    """
    if not script.is_file():
        raise ConfigurationError(f"Hook script {script} does not exist")
    if not os.access(script, os.X_OK):
        raise ConfigurationError(f"Hook script {script} is not executable")


def run_hook(script: Path, new_path: Path) -> None:
    """Run the hook script with the renamed file's absolute path as sole argument.

    The script's output is left alone; only launch failures and a non-zero
    exit status are reported.

    Raises:
        HookError: If the script cannot be started or exits with an error.
    """
    target = str(Path(new_path).absolute())
    try:
        subprocess.run([str(Path(script).absolute()), target], check=True)
    except subprocess.CalledProcessError as e:
        raise HookError(f"Hook {script} exited with status {e.returncode} for {target}") from e
    except OSError as e:
        raise HookError(f"Unable to run hook {script}: {e.strerror or e}") from e
