import subprocess

import kk


def get_version() -> str:
    # the version string was patched by a release - return __version__ which will be correct
    if kk.__version__ != "dev":
        return kk.__version__

    # we are running from an unreleased dev version
    try:
        # Get the latest git tag
        tag = subprocess.check_output(["git", "describe", "--tags"], stderr=subprocess.DEVNULL).decode().strip()

        # Get the current branch name
        branch = (
            subprocess.check_output(["git", "rev-parse", "--abbrev-ref", "HEAD"], stderr=subprocess.DEVNULL)
            .decode()
            .strip()
        )

        # Check if there are uncommitted changes
        status = subprocess.check_output(["git", "status", "--porcelain"], stderr=subprocess.DEVNULL).decode().strip()
        dirty = "-dirty" if status else ""

        return f"{tag}-{branch}{dirty}"

    except (OSError, subprocess.CalledProcessError):
        return kk.__version__
