"""Base adapter interface — Abstract data-port contract and exceptions."""

from hypermongo.adapters.base.adapter import DataAdapter
from hypermongo.adapters.base.exceptions import HyperError

__all__ = ["DataAdapter", "HyperError"]
