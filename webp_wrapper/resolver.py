"""Locate the external tool on disk."""

import os
from typing import List, Mapping, Optional, Sequence

import structlog

from .exceptions import ExecutableNotFoundError

logger = structlog.get_logger()


def search_directories(
    search_variables: Sequence[str],
    separator: str,
    environ: Optional[Mapping[str, str]] = None,
) -> List[str]:
    """Collect directories from path-list variables, in order, without duplicates."""
    environ = os.environ if environ is None else environ
    dirs: List[str] = []
    for variable in search_variables:
        paths = environ.get(variable)
        if not paths:
            continue
        for entry in paths.split(separator):
            if entry and entry not in dirs:
                dirs.append(entry)
    return dirs


def resolve_executable(
    filename: str,
    search_variables: Sequence[str],
    separator: str = os.pathsep,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Resolve a tool filename or path to an absolute path.

    An existing file is used as given. A bare filename is then looked up,
    by exact name, in the directories listed by ``search_variables``.

    Args:
        filename: Tool filename or path
        search_variables: Environment variables holding directory lists,
            searched in order
        separator: Platform path-list separator
        environ: Environment to read (default: ``os.environ``)

    Returns:
        Absolute path to the tool

    Raises:
        ExecutableNotFoundError: If no candidate exists
    """
    if os.path.isfile(filename):
        return os.path.abspath(filename)

    if os.path.basename(filename) == filename:
        for directory in search_directories(search_variables, separator, environ):
            candidate = os.path.join(directory, filename)
            if os.path.isfile(candidate):
                logger.debug("Found external tool", tool=filename, path=candidate)
                return os.path.abspath(candidate)

    logger.warning(
        "External tool not found", tool=filename, variables=list(search_variables)
    )
    raise ExecutableNotFoundError(filename)
