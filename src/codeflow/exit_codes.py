"""Numeric process exit codes used by the ``codeflow`` command line.

Each constant maps to an error category and is referenced by the
corresponding :class:`~codeflow.exceptions.CodeflowError` subclass so that
shell scripts can tell a denied consent apart from an unreachable provider
without parsing stderr.

Example::

    $ codeflow callback github --param error=access_denied --state abc
    $ echo $?
    4   # EXIT_CALLBACK_ERROR -- the provider redirected with an error
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIGURATION_ERROR = 3
"""A provider endpoint, credential, or config file is missing or invalid."""

EXIT_CALLBACK_ERROR = 4
"""The provider redirected back with an ``error`` parameter."""

EXIT_CSRF_ERROR = 5
"""The ``state`` parameter was missing or did not match."""

EXIT_REQUEST_ERROR = 6
"""A request to the provider failed or returned an unusable response."""
