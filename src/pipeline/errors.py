# src/pipeline/errors.py

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pack build errors."""


class FatalPipelineError(PipelineError):
    """
    Error that must abort the whole run.

    The orchestrator catches and logs every other generator failure; this
    one is re-raised so the CLI can exit non-zero.
    """


class GeneratorLoadError(PipelineError):
    """A generator module could not be imported or has no entry point."""


class DefinitionError(PipelineError):
    """A single model definition is malformed or incomplete."""
