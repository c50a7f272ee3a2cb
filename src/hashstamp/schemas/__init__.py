"""Pydantic schemas for hashstamp output."""

from .stamp import BenchOut, MintOut, VerifyOut

__all__ = ["BenchOut", "MintOut", "VerifyOut"]
