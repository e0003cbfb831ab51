"""Pydantic schemas for the leasing engine."""

from leasing.schemas.reconciliation import *
