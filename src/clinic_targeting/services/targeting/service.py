"""High-level orchestration for targeting export requests."""

from __future__ import annotations

import logging

import numpy as np

from ...data.territories_repository import RepositoryTerritorySource, find_territory
from ...persistence.filesystem import FileStorage
from ...schemas.targeting import TargetingDocument, TargetingRequest
from ..outputs.formatter import targeting_document_to_json, targeting_filename
from .assembler import generate_targeting
from .collaborators import AddressResolver, NullAddressResolver, TerritorySource


class TerritoryNotFoundError(LookupError):
    pass


def get_territory_source() -> TerritorySource:
    return RepositoryTerritorySource()


def get_address_resolver() -> AddressResolver:
    return NullAddressResolver()


async def process_targeting_request(clinic_id: str, payload: TargetingRequest) -> TargetingDocument:
    source = get_territory_source()
    territories = await source.list_territories()
    territory = find_territory(territories, clinic_id)
    if territory is None:
        raise TerritoryNotFoundError(f"Clinic '{clinic_id}' not found.")

    document = await generate_targeting(
        territory,
        territory_source=source,
        address_resolver=get_address_resolver(),
        rng=np.random.default_rng(payload.seed),
    )

    if payload.persist:
        try:
            storage = FileStorage()
            run_dir = storage.make_run_directory(prefix=f"targeting_{clinic_id}")
            storage.write_json(
                run_dir / targeting_filename(territory.clinic_id, territory.clinic_name),
                targeting_document_to_json(document),
            )
        except OSError as exc:
            # The document is still returned to the caller.
            logging.warning(f"Failed to write targeting export for clinic {clinic_id}: {exc}")

    return document
