"""Exception definitions for SmartForm"""


class SmartFormException(Exception):
    """Base exception for all SmartForm errors.

    All custom exceptions in SmartForm inherit from this class. Use this as a
    catch-all for SmartForm-specific errors when you don't need to handle
    specific exception types.
    """

    pass


class DefinitionError(SmartFormException):
    """Raised when a form is declared incorrectly.

    Use this exception when:
    - A select field is declared without options
    - An array field is declared without its item fields
    - A field name is empty or duplicated within one field list
    - Field configuration is out of range (span, rows, ...)

    These are programmer errors and are raised before any store exists.
    """

    pass


class DeclarationError(DefinitionError):
    """Raised when a form declaration file cannot be loaded.

    Use this exception when:
    - The declaration file cannot be found
    - The TOML syntax is invalid
    - A field or validator entry uses an unknown kind
    """

    pass


class PathError(SmartFormException):
    """Raised when a store path is malformed or cannot address the value tree."""

    pass


class ConfigException(SmartFormException):
    """Raised when configuration validation or loading fails.

    Use this exception when:
    - The configuration file cannot be found
    - The TOML syntax is invalid
    - Configuration validation fails (missing required fields, invalid values)
    """

    pass
