"""Exception types raised inside the analysis pipeline.

Only :class:`InvocationError` is allowed to short-circuit the real analysis
path; the others are caught by the stage that raised them and turned into a
degraded (but complete) result.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for every error raised by a pipeline stage."""


class AugmentationError(PipelineError):
    """The opportunity lookup failed."""


class AugmentationTimeout(AugmentationError):
    """The opportunity lookup did not finish before its deadline."""


class InvocationError(PipelineError):
    """The reasoning backend could not be reached or refused the request."""


class ParseError(PipelineError):
    """The reasoning backend answered with something that is not a JSON object."""
