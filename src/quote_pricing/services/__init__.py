"""Services subpackage - batch operations over exported quotes."""
from .batch_service import load_quotes_csv, reprice_frame

__all__ = ['load_quotes_csv', 'reprice_frame']
