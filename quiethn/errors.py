"""Errors raised across the fetch pipeline."""


class UpstreamError(Exception):
    """A single call to the Hacker News API failed."""


class PipelineError(Exception):
    """The top stories could not be produced at all."""
