"""Material presets offered when creating a group or recording materials."""

from __future__ import annotations

from dataclasses import dataclass, field

from oneman.errors import ValidationError


@dataclass(frozen=True)
class MaterialPreset:
    name: str
    unit: str


@dataclass(frozen=True)
class MaterialSet:
    id: str
    name: str
    description: str
    materials: tuple[MaterialPreset, ...]


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: str
    companies: tuple[str, ...] = field(default_factory=tuple)


def _presets(*pairs: tuple[str, str]) -> tuple[MaterialPreset, ...]:
    return tuple(MaterialPreset(name, unit) for name, unit in pairs)


_TELECOM_COMMON = (
    ("Fiber Optic Cable", "m"),
    ("Copper Wire", "m"),
    ("RJ45 Connectors", "pieces"),
    ("Network Switches", "units"),
    ("Cable Ties", "pieces"),
    ("Cable Trays", "m"),
    ("Patch Panels", "units"),
    ("Cable Testers", "units"),
    ("Crimping Tools", "units"),
    ("Cable Markers", "pieces"),
)

_TELECOM_ACCESSORIES = (
    ("Power Adapter", "units"),
    ("Ethernet Cable", "m"),
    ("Splitter", "pieces"),
    ("Coupler", "pieces"),
    ("Terminal Block", "pieces"),
    ("Distribution Box", "units"),
    ("Grounding Wire", "m"),
)

_PIPELINE_COMMON = (
    ("Steel Pipes", "m"),
    ("Pipe Fittings", "pieces"),
    ("Valves", "units"),
    ("Gaskets", "pieces"),
    ("Pipe Wraps", "m"),
    ("Cathodic Protection", "units"),
    ("Pipe Insulation", "m"),
    ("Welding Rods", "kg"),
    ("Pipe Supports", "pieces"),
    ("Pressure Gauges", "units"),
)


def _branded(brand: str, *items: str) -> tuple[tuple[str, str], ...]:
    return tuple((f"{brand} {item}", "units") for item in items)


MATERIAL_SETS: tuple[MaterialSet, ...] = (
    MaterialSet(
        "airtel",
        "Airtel",
        "Airtel telecommunications equipment and materials",
        _presets(
            *_TELECOM_COMMON,
            *_branded("Airtel", "Router", "Modem", "Antenna"),
            *_TELECOM_ACCESSORIES,
        ),
    ),
    MaterialSet(
        "jio",
        "Jio",
        "Jio telecommunications equipment and materials",
        _presets(
            *_TELECOM_COMMON,
            *_branded("Jio", "Router", "Modem", "Antenna"),
            *_TELECOM_ACCESSORIES,
        ),
    ),
    MaterialSet(
        "adani",
        "Adani",
        "Adani gas pipeline equipment and materials",
        _presets(
            *_PIPELINE_COMMON,
            *_branded(
                "Adani", "Compressor", "Meter", "Regulator", "Filter", "Control Valve"
            ),
        ),
    ),
    MaterialSet(
        "reliance",
        "Reliance",
        "Reliance gas pipeline equipment and materials",
        _presets(
            *_PIPELINE_COMMON,
            *_branded(
                "Reliance",
                "Compressor",
                "Meter",
                "Regulator",
                "Filter",
                "Control Valve",
            ),
        ),
    ),
)

CATEGORIES: tuple[Category, ...] = (
    Category(
        "telecom",
        "Telecom",
        "Telecommunications equipment and materials",
        ("airtel", "jio"),
    ),
    Category(
        "gaspipeline",
        "Gas Pipeline",
        "Gas pipeline construction and maintenance materials",
        ("adani", "reliance"),
    ),
)


def get_material_set(set_id: str) -> MaterialSet | None:
    """Return the material set with the given id, if any."""
    return next((s for s in MATERIAL_SETS if s.id == set_id), None)


def get_category(category_id: str) -> Category | None:
    """Return the category with the given id, if any."""
    return next((c for c in CATEGORIES if c.id == category_id), None)


def validate_selection(category_id: str | None, companies: list[str]) -> None:
    """Check that the chosen companies belong to the chosen category."""
    if not category_id and not companies:
        return
    category = get_category(category_id or "")
    if category is None:
        raise ValidationError(f"Unknown category: {category_id}")
    if not companies:
        raise ValidationError("Please select at least one company.")
    unknown = [c for c in companies if c not in category.companies]
    if unknown:
        raise ValidationError(
            f"{', '.join(unknown)} not available for {category.name}."
        )


def presets_for(companies: list[str]) -> list[MaterialPreset]:
    """Return the distinct material presets of the selected companies."""
    seen: set[MaterialPreset] = set()
    presets = []
    for company in companies:
        material_set = get_material_set(company)
        if material_set is None:
            continue
        for preset in material_set.materials:
            if preset not in seen:
                seen.add(preset)
                presets.append(preset)
    return presets


def catalog_as_dict() -> dict[str, list[dict[str, object]]]:
    """Return the whole catalog in a JSON-friendly shape."""
    return {
        "categories": [
            {
                "id": c.id,
                "name": c.name,
                "description": c.description,
                "companies": list(c.companies),
            }
            for c in CATEGORIES
        ],
        "materialSets": [
            {
                "id": s.id,
                "name": s.name,
                "description": s.description,
                "materials": [{"name": m.name, "unit": m.unit} for m in s.materials],
            }
            for s in MATERIAL_SETS
        ],
    }
