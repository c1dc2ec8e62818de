"""Follow a Bundle's 'next' links and aggregate every page into one Bundle."""
import logging
import threading
from typing import Optional

from fhir_pager.errors import FetchCancelledError, InvalidArgumentError
from fhir_pager.resources import LINK_NEXT, Bundle

logger = logging.getLogger(__name__)


class BundleFetcher:
    """Given a client and a first page, fetches every remaining page.

    The client only needs a ``fetch_next_page(bundle)`` method.
    """

    def __init__(self, client, original_bundle: Bundle):
        self._client = client
        self._original_bundle = original_bundle

    @classmethod
    def starting_with(cls, client, original_bundle: Bundle) -> "BundleFetcher":
        """Create a fetcher.

        Raises:
            InvalidArgumentError: if either argument is None
        """
        if client is None:
            raise InvalidArgumentError("client cannot be None")
        if original_bundle is None:
            raise InvalidArgumentError("original_bundle cannot be None")
        return cls(client, original_bundle)

    def fetch_all(self, cancel_event: Optional[threading.Event] = None) -> Bundle:
        """Fetch all results by walking the 'next' links.

        A total that does not match the number of entries is logged, not
        raised; whatever was fetched is returned. Links are removed from the
        result since they no longer describe it.

        Args:
            cancel_event: Checked before each page request

        Returns:
            A new Bundle holding the entries of every page
        """
        aggregated = self._original_bundle.copy()
        partial = self._original_bundle
        logger.debug(
            "Original bundle search matched %s total resource(s) and %d resource(s) are in this bundle.",
            "an unknown number of" if partial.total is None else partial.total,
            len(partial.entry),
        )

        while partial.get_link(LINK_NEXT) is not None:
            if cancel_event is not None and cancel_event.is_set():
                raise FetchCancelledError("Fetching the next page was cancelled")
            partial = self._client.fetch_next_page(partial)
            logger.debug("Got the next bundle. It had %d resource(s) in it.", len(partial.entry))
            aggregated.entry.extend(partial.entry)

        if aggregated.total is not None and aggregated.total != len(aggregated.entry):
            logger.error(
                "Counts didn't match! Expected %d resource(s) but the bundle only had %d resource(s)!",
                aggregated.total,
                len(aggregated.entry),
            )

        aggregated.link.clear()
        return aggregated


def fetch_all(client, starting_page: Bundle, cancel_event: Optional[threading.Event] = None) -> Bundle:
    """Shortcut for ``BundleFetcher.starting_with(client, starting_page).fetch_all()``."""
    return BundleFetcher.starting_with(client, starting_page).fetch_all(cancel_event)
