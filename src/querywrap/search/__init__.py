"""Search-engine transport for querywrap.

Example:
    >>> from querywrap.core.types import SolrSettings
    >>> from querywrap.search import SolrClient
    >>>
    >>> client = SolrClient(SolrSettings(url="http://127.0.0.1:8983/solr/techproducts"))
    >>> body = client.query({"query": "*:*", "limit": 5})
    >>> docs = body["response"]["docs"]
"""

from querywrap.search.client import SolrClient

__all__ = ["SolrClient"]
