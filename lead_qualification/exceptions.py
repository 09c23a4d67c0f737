"""
lead_qualification/exceptions.py — Error taxonomy for a qualification run.

Oracle errors are always recovered with documented defaults and never reach
the caller. AggregationInputMissing is the only error that aborts a run.
"""


class LeadQualificationError(Exception):
    """Base class for all errors raised by this package."""


class OracleError(LeadQualificationError):
    """The analysis oracle could not produce a usable estimate."""

    def __init__(self, item: str, message: str):
        self.item = item
        super().__init__(f"{item}: {message}")


class OracleUnavailable(OracleError):
    """Timeout or transport failure while calling the oracle."""


class OracleMalformedResponse(OracleError):
    """The oracle answered, but the content is unparseable or has the wrong shape."""


class AggregationInputMissing(LeadQualificationError):
    """The aggregator did not receive exactly one dimension per required name."""
