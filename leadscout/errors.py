"""Exception types surfaced by the search pipeline."""


class LeadScoutError(Exception):
    """Base class for pipeline errors."""


class DiscoveryFailure(LeadScoutError):
    """The candidate source could not be reached or returned an error.

    Fatal to the whole search.
    """


class PersistenceFailure(LeadScoutError):
    """A read or write against the lead/search store failed."""
