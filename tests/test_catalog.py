"""Tests for the material catalog."""

import unittest

from oneman.errors import ValidationError
from oneman.group.catalog import (
    catalog_as_dict,
    get_category,
    get_material_set,
    presets_for,
    validate_selection,
)


class CatalogTestCase(unittest.TestCase):
    def test_categories_reference_known_sets(self):
        catalog = catalog_as_dict()
        set_ids = {s["id"] for s in catalog["materialSets"]}
        for category in catalog["categories"]:
            self.assertTrue(set(category["companies"]) <= set_ids)

    def test_lookup(self):
        self.assertEqual(get_category("gaspipeline").companies, ("adani", "reliance"))
        self.assertIsNone(get_category("bakery"))
        self.assertIn(
            ("Airtel Router", "units"),
            [(m.name, m.unit) for m in get_material_set("airtel").materials],
        )

    def test_validate_selection(self):
        validate_selection(None, [])
        validate_selection("telecom", ["airtel", "jio"])
        with self.assertRaises(ValidationError):
            validate_selection("telecom", [])
        with self.assertRaises(ValidationError):
            validate_selection("telecom", ["reliance"])
        with self.assertRaises(ValidationError):
            validate_selection("bakery", ["airtel"])

    def test_presets_are_deduplicated(self):
        presets = presets_for(["airtel", "jio", "unknown"])
        keys = [(p.name, p.unit) for p in presets]
        self.assertEqual(len(keys), len(set(keys)))
        self.assertIn(("Fiber Optic Cable", "m"), keys)
        self.assertIn(("Jio Modem", "units"), keys)
