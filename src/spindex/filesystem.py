"""
File locating: resolve a bare file name against a search path.

The search path comes from an environment variable holding directories
separated by ``os.pathsep`` (like ``PATH``).
"""

import logging
import os
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

DEFAULT_PATH_VAR = 'SPINDEX_PATH'


class FileLocator(ABC):
    """Turns a logical file name into the path of an existing file."""

    @abstractmethod
    def locate(self, file_name):
        """Return the path of file_name; raise FileNotFoundError if absent."""


class EnvSearchPath(FileLocator):
    """
    Locate existing files in the directories listed by an environment variable.

    The variable is read once, at construction. An unset or empty
    variable gives an empty search path.

    Parameters
    ----------
    env_var : str
        Name of the environment variable (default ``SPINDEX_PATH``).
    """

    def __init__(self, env_var=DEFAULT_PATH_VAR):
        self.env_var = env_var
        raw = os.environ.get(env_var, '')
        self.path = [d for d in raw.split(os.pathsep) if d]

    def locate(self, file_name):
        if os.path.isabs(file_name):
            if os.path.exists(file_name):
                return file_name
            raise FileNotFoundError(f"File {file_name} does not exist")

        for directory in self.path:
            candidate = os.path.join(directory, file_name)
            if os.path.exists(candidate):
                logger.debug("Located %s as %s", file_name, candidate)
                return candidate

        raise FileNotFoundError(
            f"Cannot find {file_name} in ${self.env_var} = {self.path}")

    def __repr__(self):
        return f"EnvSearchPath({self.env_var!r}, dirs={len(self.path)})"
