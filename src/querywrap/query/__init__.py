"""Query builders for querywrap.

Architecture:
    1. Predicates - AND/OR join rule, value quoting, operator suffixes
    2. Base - clause accumulator, reset cycle, hooks, find/count family
    3. SQL - statement composer and executor over SQLAlchemy
    4. Solr - JSON request composer over the search transport
"""

from querywrap.query.base import BaseQuery, Querier
from querywrap.query.hooks import Hook, HookRegistry
from querywrap.query.solr import SolrQuery
from querywrap.query.sql import SelectClauses, SQLQuery, compose_select

__all__ = [
    "Querier",
    "BaseQuery",
    "Hook",
    "HookRegistry",
    "SQLQuery",
    "SelectClauses",
    "compose_select",
    "SolrQuery",
]
