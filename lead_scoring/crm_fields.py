"""
CRM Record Adapters
===================
Turn raw CRM person/organization records into scoring inputs.

CRM custom fields are addressed by opaque keys, so organization fields are
resolved once from the CRM's field definitions (display name -> key) and
kept in a FieldMappingCache owned by the caller. Nothing here talks to the
CRM: the caller passes records and field definitions in.
"""

import logging
import math
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .models.schemas import CompanyInput, PersonInput, RelationshipStrength
from .geo import distance_to_gothenburg
from .config.settings import (
    DEFAULT_PERSON_FIELD_NAMES,
    DEFAULT_ORGANIZATION_FIELD_NAMES,
    CRITICAL_ORGANIZATION_FIELDS,
)

logger = logging.getLogger(__name__)

NON_NUMERIC = re.compile(r"[^\d.\-]")
LEADING_NUMBER = re.compile(r"-?(\d+\.?\d*|\.\d+)")


# =============================================================================
# Field value parsing
# =============================================================================

def find_field_value(record: Dict[str, Any], field_name: str) -> Any:
    """Exact key first, then a case-insensitive key match"""
    if field_name in record:
        return record[field_name]

    lowered = field_name.lower()
    for key, value in record.items():
        if key.lower() == lowered:
            return value
    return None


def parse_numeric(value: Any) -> Optional[float]:
    """
    Parse CRM numbers such as 150000000, "150 000 000 kr" or "-0.05".

    Everything except digits, "." and "-" is dropped before parsing the
    leading number; anything unparseable or non-finite becomes None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = LEADING_NUMBER.match(NON_NUMERIC.sub("", value))
        if match:
            return float(match.group(0))
    return None


def parse_functions(value: Any) -> List[str]:
    """Role list from a list field or a comma-separated string"""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return []


def parse_relationship(value: Any) -> Optional[RelationshipStrength]:
    if not isinstance(value, str):
        return None
    try:
        return RelationshipStrength(value.strip())
    except ValueError:
        logger.debug("Ignoring unrecognised relationship strength %r", value)
        return None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


# =============================================================================
# Field mapping
# =============================================================================

def map_field_keys(
    fields: Iterable[Dict[str, Any]],
    field_names: Dict[str, str],
) -> Dict[str, str]:
    """
    Resolve logical field names to CRM keys.

    Args:
        fields: CRM field definitions, each with "key" and "name"
        field_names: logical name -> display name in the CRM

    Returns:
        logical name -> CRM key, for the display names that were found
    """
    key_by_name = {str(f.get("name", "")).lower(): f.get("key") for f in fields}
    mapping = {}
    for logical, display in field_names.items():
        key = key_by_name.get(display.lower())
        if key:
            mapping[logical] = key
    return mapping


class FieldMappingCache:
    """
    Explicit cache for the organization field mapping.

    A mapping is cached only once every critical field resolves, so fields
    added to the CRM later are picked up by the next resolve. Call
    invalidate() after changing the CRM's field setup.
    """

    def __init__(
        self,
        field_names: Optional[Dict[str, str]] = None,
        critical_fields: Iterable[str] = CRITICAL_ORGANIZATION_FIELDS,
    ):
        self.field_names = dict(field_names or DEFAULT_ORGANIZATION_FIELD_NAMES)
        self.critical_fields = tuple(critical_fields)
        self._mapping: Optional[Dict[str, str]] = None

    @property
    def cached(self) -> bool:
        return self._mapping is not None

    def resolve(
        self, load_fields: Callable[[], Iterable[Dict[str, Any]]]
    ) -> Optional[Dict[str, str]]:
        """
        Return the cached mapping, or build one from `load_fields()`.

        Returns None when the organization number field cannot be found.
        """
        if self._mapping is not None:
            return self._mapping

        mapping = map_field_keys(load_fields(), self.field_names)
        if not mapping.get("org_number"):
            return None

        if all(mapping.get(name) for name in self.critical_fields):
            self._mapping = mapping
        else:
            logger.info(
                "Field mapping incomplete (missing %s); not caching",
                [name for name in self.critical_fields if not mapping.get(name)],
            )
        return mapping

    def invalidate(self):
        self._mapping = None


# =============================================================================
# Input builders
# =============================================================================

def build_person_input(
    record: Dict[str, Any],
    activity_count: Optional[int] = None,
    field_names: Optional[Dict[str, str]] = None,
) -> PersonInput:
    """
    Scoring input from a CRM person record.

    Args:
        record: Person record keyed by field display name
        activity_count: Activities in the last 90 days, if fetched
        field_names: Overrides for the person field display names
    """
    names = {**DEFAULT_PERSON_FIELD_NAMES, **(field_names or {})}
    return PersonInput(
        functions=parse_functions(find_field_value(record, names["functions"])),
        relationship_strength=parse_relationship(
            find_field_value(record, names["relationship_strength"])
        ),
        activities_90d=activity_count,
    )


def build_company_input(
    record: Optional[Dict[str, Any]],
    mapping: Optional[Dict[str, str]],
    coordinates: Optional[Tuple[float, float]] = None,
) -> CompanyInput:
    """
    Scoring input from a CRM organization record and a resolved mapping.

    Args:
        record: Organization record keyed by CRM field key
        mapping: logical name -> CRM key (see FieldMappingCache)
        coordinates: Geocoded (latitude, longitude), used only when the
            record has no stored distance

    A missing record or mapping yields an empty input, which scores on
    defaults.
    """
    if not record or not mapping:
        return CompanyInput()

    def value(name: str) -> Any:
        key = mapping.get(name)
        return record.get(key) if key else None

    distance_km = parse_numeric(value("distance_km"))
    if distance_km is None and coordinates is not None:
        distance_km = distance_to_gothenburg(*coordinates)

    employees = parse_numeric(value("employees"))
    return CompanyInput(
        revenue=parse_numeric(value("revenue")),
        cagr_3y=parse_numeric(value("cagr_3y")),
        industry=_text(value("industry")),
        distance_km=distance_km,
        employees=int(employees) if employees is not None else None,
        score=parse_numeric(value("score")),
    )
