"""
Table name parsing

Naming grammar (tier prefix, then name, then optional part suffix):

    ~name            hidden
    #name            lookup
    __name           computed
    _name            imported
    name             manual     (first character a lowercase ASCII letter)
    anything else    unknown

A part table extends its master's raw name with the marker `__` followed by
the part name: `_scan__channel` is the part `channel` of `_scan`. The marker
is searched for after the tier prefix, so `__stats` is a computed master and
`__stats__detail` its part. Parts share their master's tier.
"""
import logging
from collections import OrderedDict
from typing import Iterable, List, Sequence, Tuple

from table_browser.core.exceptions import UnknownTierOrderingError
from table_browser.schemas.table import TableName, TableTier, TierGroup

logger = logging.getLogger(__name__)

PART_MARKER = "__"

# Longest prefix first, "__" must win over "_"
TIER_PREFIXES: Tuple[Tuple[str, TableTier], ...] = (
    ("~", TableTier.HIDDEN),
    ("#", TableTier.LOOKUP),
    ("__", TableTier.COMPUTED),
    ("_", TableTier.IMPORTED),
)

TIER_ORDER: List[TableTier] = [
    TableTier.MANUAL,
    TableTier.LOOKUP,
    TableTier.IMPORTED,
    TableTier.COMPUTED,
    TableTier.HIDDEN,
    TableTier.UNKNOWN,
]


def _split_prefix(raw_name: str) -> Tuple[str, TableTier]:
    for prefix, tier in TIER_PREFIXES:
        if raw_name.startswith(prefix) and len(raw_name) > len(prefix):
            return prefix, tier
    if raw_name[:1].isascii() and raw_name[:1].islower():
        return "", TableTier.MANUAL
    return "", TableTier.UNKNOWN


def classify_tier(raw_name: str) -> TableTier:
    return _split_prefix(raw_name)[1]


def parse(raw_name: str) -> TableName:
    """Build a TableName (without parts) from a raw catalog name"""
    prefix, tier = _split_prefix(raw_name)
    body = raw_name[len(prefix):]

    master_name, marker, part_name = body.partition(PART_MARKER)
    if marker and master_name and part_name:
        return TableName(
            raw_name=raw_name,
            tier=tier,
            name=body,
            master_raw_name=prefix + master_name,
            part_name=part_name,
        )

    return TableName(raw_name=raw_name, tier=tier, name=body)


def group_hierarchy(names: Iterable[TableName]) -> List[TableName]:
    """
    Fold a flat list of names into masters carrying their parts

    Masters keep their order of first appearance and parts keep theirs. A part
    whose master is not in the input is dropped.
    """
    masters: "OrderedDict[str, TableName]" = OrderedDict()
    parts: List[TableName] = []

    for table_name in names:
        if table_name.is_part:
            parts.append(table_name)
        elif table_name.raw_name not in masters:
            masters[table_name.raw_name] = table_name.model_copy(update={"parts": []})

    for part in parts:
        master = masters.get(part.master_raw_name)
        if master is None:
            logger.warning(
                f"[TableName] Skipping part '{part.raw_name}', master '{part.master_raw_name}' not found"
            )
            continue
        master.parts.append(part)

    return list(masters.values())


def unflatten(raw_names: Iterable[str]) -> List[TableName]:
    """Parse raw names and group them in one step"""
    return group_hierarchy(parse(raw) for raw in raw_names)


def tier_position(tier: TableTier) -> int:
    """Index of a tier in TIER_ORDER"""
    try:
        return TIER_ORDER.index(tier)
    except ValueError:
        raise UnknownTierOrderingError(tier)


def group_by_tier(masters: Sequence[TableName]) -> List[TierGroup]:
    """Group masters by tier, groups ordered by TIER_ORDER"""
    groups: "OrderedDict[TableTier, TierGroup]" = OrderedDict()
    for master in masters:
        group = groups.get(master.tier)
        if group is None:
            group = groups[master.tier] = TierGroup.model_construct(tier=master.tier, names=[])
        group.names.append(master)

    return sorted(groups.values(), key=lambda g: tier_position(g.tier))
