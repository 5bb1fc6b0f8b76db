"""Utilities to serialize targeting documents into export artifacts."""

from __future__ import annotations

import re

from ...schemas.targeting import TargetingDocument


def targeting_document_to_json(document: TargetingDocument) -> dict:
    # Optional location metadata is omitted rather than emitted as null.
    return document.model_dump(mode="json", exclude_none=True)


def targeting_filename(clinic_id: str, clinic_name: str) -> str:
    safe_name = re.sub(r"\s+", "_", clinic_name)
    return f"facebook_targeting_{clinic_id}_{safe_name}.json"
