"""
Adapters package - Store connections.
The record store is the only gateway to registration data.
"""

from adapters.record_store import RecordStore, TxReader, TxWriter, WriteOp

__all__ = ["RecordStore", "TxReader", "TxWriter", "WriteOp"]
