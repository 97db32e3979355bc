# Copyright 2025 thestill.me
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for the feed storage layer.

Only startup problems are raised as exceptions: a missing or unsupported
datasource, or a schema that cannot be applied. Ordinary per-call failures
(constraint violations, missing rows, a closed connection) are reported
through ``StorageResult`` and never cross the repository boundary.

Example:
    try:
        repos = create_repositories(config)
    except ConfigurationError as e:
        logger.error("Bad storage configuration", error=str(e))
        raise
"""


class FeedStoreError(Exception):
    """
    Base exception for all feedstore errors.

    Attributes:
        message: Human-readable error message
        context: Optional dict of additional error context (datasource, table, ...)

    Example:
        raise FeedStoreError("Unknown query", table="feed", operation="explode")
    """

    def __init__(self, message: str, **context):
        """
        Initialize FeedStoreError.

        Args:
            message: Human-readable error message
            **context: Optional keyword arguments for error context
        """
        super().__init__(message)
        self.message = message
        self.context = context if context else {}

    def __str__(self):
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self):
        name = type(self).__name__
        if self.context:
            return f"{name}(message={self.message!r}, context={self.context!r})"
        return f"{name}(message={self.message!r})"


class ConfigurationError(FeedStoreError):
    """Raised when no usable datasource is configured."""

    pass


class SchemaError(FeedStoreError):
    """
    Raised when the table DDL cannot be applied to the database.

    Example:
        raise SchemaError("Failed to apply schema", datasource=path, error=str(e))
    """

    pass


__all__ = ["FeedStoreError", "ConfigurationError", "SchemaError"]
