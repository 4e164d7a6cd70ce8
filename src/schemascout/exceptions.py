"""SchemaScout exception hierarchy.

All public exceptions inherit from SchemaScoutError, giving callers a single
base class to catch when they want to handle any SchemaScout-specific failure
without swallowing unrelated errors.

Per-file problems (unparseable YAML, unreadable files, unknown schema tags)
are never raised; the scanner logs them and keeps going. Only the conditions
below escape to the caller.
"""


class SchemaScoutError(Exception):
    """Base exception for all SchemaScout errors."""


class ProjectRootError(SchemaScoutError):
    """Raised when the project root cannot be scanned at all.

    Covers a root path that does not exist, is not a directory, or cannot
    be listed. This is the only condition that aborts a scan.
    """


class ConfigError(SchemaScoutError):
    """Raised when a project config file exists but cannot be used.

    Covers YAML syntax errors (reported with file, line and column), files
    whose document root is not a mapping, settings of the wrong type and
    ignore/include patterns that do not compile.
    """


class SchemaDefinitionError(SchemaScoutError):
    """Raised when a schema definition is malformed.

    Covers custom schemas declared in the project config with a missing
    identifier, an identifier that violates the ``namespace/name`` grammar,
    or an unknown scope or carrier.
    """
