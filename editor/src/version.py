"""Application version module.

In a source checkout: derives the version from the VERSION file + git commit
count since the last tag. When installed as a distribution: uses the
installed package metadata.
"""

DISTRIBUTION_NAME = 'isometric-asset-positioning'


def get_version() -> str:
    """Get the application version string (e.g. '0.1.12').

    Returns the git-derived version when a VERSION file is present next to
    the sources, otherwise the installed distribution's version.
    """
    version_file = _version_file()
    if version_file.exists():
        return _dev_version(version_file)
    return _installed_version()


def _version_file():
    from pathlib import Path

    # editor/src/version.py -> ../../VERSION -> project root
    return Path(__file__).resolve().parent.parent.parent / "VERSION"


def _installed_version() -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0.0.0"


def _dev_version(version_file) -> str:
    """Derive version from VERSION file and git describe."""
    import subprocess

    major_minor = version_file.read_text().strip() or "0.0"

    # Get commit count since last tag
    try:
        result = subprocess.run(
            ['git', 'describe', '--tags', '--long'],
            capture_output=True, text=True, check=False,
            cwd=str(version_file.parent),
        )
        if result.returncode == 0:
            # Format: v0.1-5-gabcdef  ->  parts[-2] = commit count
            parts = result.stdout.strip().rsplit('-', 2)
            if len(parts) == 3:
                return f"{major_minor}.{parts[1]}"
    except FileNotFoundError:
        pass  # git not installed

    return f"{major_minor}.0"
