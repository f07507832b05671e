from sqlsnip.utils import logging, text

__all__ = ("logging", "text")
