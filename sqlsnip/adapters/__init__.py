from sqlsnip.adapters.dialect import DialectAdapter
from sqlsnip.adapters.generic import GenericAdapter

__all__ = ("DialectAdapter", "GenericAdapter")
