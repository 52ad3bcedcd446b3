from typing import Tuple

from conductor_sizing.core.calculator import SizeSelector
from conductor_sizing.core.errors import SizeNotFound
from conductor_sizing.core.models import CatalogEntry, ConductorMaterial, Standard
from conductor_sizing.standards.registry import get_rules


def all_sizes(standard: Standard, material: ConductorMaterial) -> Tuple[CatalogEntry, ...]:
    """Every catalog entry for the standard and material, smallest first."""
    return get_rules(standard).catalog(material)


def lookup(standard: Standard, material: ConductorMaterial, size_selector: SizeSelector) -> CatalogEntry:
    """Exact catalog entry for a size such as "16", "16 mm²", 16.0, "4/0 AWG" or "250 kcmil".

    Selectors are only matched against the requested standard's table, so a
    metric size never resolves to an imperial entry or vice versa.
    """
    rules = get_rules(standard)
    for entry in rules.catalog(material):
        if rules.matches(entry, size_selector):
            return entry
    raise SizeNotFound(
        f"No {standard.value} {material.value.lower()} conductor of size '{size_selector}'",
        field="size",
    )


def practical_sizes(standard: Standard, material: ConductorMaterial,
                    min_selector: SizeSelector) -> Tuple[CatalogEntry, ...]:
    """Catalog tail starting at the smallest size considered for paralleling."""
    entries = all_sizes(standard, material)
    start = entries.index(lookup(standard, material, min_selector))
    return entries[start:]


def largest(standard: Standard, material: ConductorMaterial) -> CatalogEntry:
    return all_sizes(standard, material)[-1]
