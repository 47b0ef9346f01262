"""Tests for the material ledger operations."""

import unittest

from oneman.errors import InsufficientQuantity, InvalidAmount, MaterialNotFound
from oneman.inventory import ledger


class LedgerAddTestCase(unittest.TestCase):
    def test_add_appends_new_entry(self):
        result = ledger.add([], "Cable Ties", "pieces", 100, "North Site")
        self.assertEqual(len(result), 1)
        entry = result[0]
        self.assertEqual(entry["name"], "Cable Ties")
        self.assertEqual(entry["unit"], "pieces")
        self.assertEqual(entry["amount"], 100)
        self.assertEqual(entry["location"], "North Site")
        self.assertTrue(entry["id"])

    def test_add_merges_same_name_and_unit(self):
        first = ledger.add([], "Steel Pipes", "m", 10, "North Site")
        second = ledger.add(first, "Steel Pipes", "m", 5, "North Site")
        self.assertEqual(len(second), 1)
        self.assertEqual(second[0]["amount"], 15)
        self.assertEqual(second[0]["id"], first[0]["id"])

    def test_add_keeps_units_apart(self):
        result = ledger.add([], "Steel Pipes", "m", 10, "A")
        result = ledger.add(result, "Steel Pipes", "pieces", 2, "A")
        self.assertEqual(len(result), 2)

    def test_add_merges_into_first_duplicate_only(self):
        existing = [
            {"id": "a", "name": "Valves", "unit": "units", "amount": 1},
            {"id": "b", "name": "Valves", "unit": "units", "amount": 2},
        ]
        result = ledger.add(existing, "Valves", "units", 3, "A")
        self.assertEqual([e["amount"] for e in result], [4, 2])

    def test_add_does_not_mutate_input(self):
        existing = [{"id": "a", "name": "Valves", "unit": "units", "amount": 1}]
        ledger.add(existing, "Valves", "units", 3, "A")
        self.assertEqual(existing[0]["amount"], 1)

    def test_add_updates_location_label(self):
        existing = [
            {
                "id": "a",
                "name": "Valves",
                "unit": "units",
                "amount": 1,
                "location": "Old",
            }
        ]
        result = ledger.add(existing, "Valves", "units", 1, "New")
        self.assertEqual(result[0]["location"], "New")

    def test_add_keeps_fractional_amounts(self):
        result = ledger.add([], "Welding Rods", "kg", "2.5", "A")
        result = ledger.add(result, "Welding Rods", "kg", 0.25, "A")
        self.assertEqual(result[0]["amount"], 2.75)

    def test_add_rejects_invalid_amounts(self):
        for bad in (0, -1, "abc", None, "", float("nan"), float("inf"), True):
            with self.subTest(amount=bad):
                with self.assertRaises(InvalidAmount):
                    ledger.add([], "Valves", "units", bad, "A")


class LedgerRemoveTestCase(unittest.TestCase):
    def setUp(self):
        self.ledger = [{"id": "e1", "name": "Valves", "unit": "units", "amount": 20}]

    def test_remove_exact_amount_deletes_entry(self):
        self.assertEqual(ledger.remove(self.ledger, "e1", 20), [])

    def test_remove_partial_amount_decrements(self):
        result = ledger.remove(self.ledger, "e1", 5)
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0]["amount"], 15)

    def test_remove_more_than_available(self):
        with self.assertRaises(InsufficientQuantity):
            ledger.remove(self.ledger, "e1", 21)
        self.assertEqual(self.ledger[0]["amount"], 20)

    def test_remove_unknown_entry(self):
        with self.assertRaises(MaterialNotFound):
            ledger.remove(self.ledger, "missing", 1)

    def test_remove_by_key(self):
        result = ledger.remove_by_key(self.ledger, "Valves", "units", 4)
        self.assertEqual(result[0]["amount"], 16)
        with self.assertRaises(MaterialNotFound):
            ledger.remove_by_key(self.ledger, "Valves", "m", 1)

    def test_remove_decimal_steps_empties_entry(self):
        current = ledger.add([], "Sand", "t", 0.3, "A")
        entry_id = current[0]["id"]
        current = ledger.remove(current, entry_id, 0.1)
        self.assertEqual(current[0]["amount"], 0.2)
        self.assertEqual(ledger.remove(current, entry_id, 0.2), [])

    def test_remove_decimal_sum_empties_entry(self):
        current = ledger.add([], "Sand", "t", 0.1, "A")
        current = ledger.add(current, "Sand", "t", 0.2, "A")
        self.assertEqual(current[0]["amount"], 0.3)
        self.assertEqual(ledger.remove(current, current[0]["id"], "0.3"), [])

    def test_no_entry_at_or_below_zero_survives(self):
        current = ledger.add([], "Gaskets", "pieces", 7, "A")
        entry_id = current[0]["id"]
        for amount in (3, 2, 2):
            current = ledger.remove(current, entry_id, amount)
            self.assertTrue(all(e["amount"] > 0 for e in current))
        self.assertEqual(current, [])


class LedgerTransferTestCase(unittest.TestCase):
    def test_transfer_conserves_total(self):
        source = [{"id": "s1", "name": "Valves", "unit": "units", "amount": 10}]
        dest = [{"id": "d1", "name": "Valves", "unit": "units", "amount": 1}]
        new_source, new_dest = ledger.transfer(
            source, dest, "Valves", "units", 3, "South Store"
        )
        self.assertEqual(new_source[0]["amount"], 7)
        self.assertEqual(new_dest[0]["amount"], 4)
        before = ledger.total(source, "Valves", "units") + ledger.total(
            dest, "Valves", "units"
        )
        after = ledger.total(new_source, "Valves", "units") + ledger.total(
            new_dest, "Valves", "units"
        )
        self.assertEqual(before, after)

    def test_transfer_creates_destination_entry(self):
        source = [{"id": "s1", "name": "Valves", "unit": "units", "amount": 3}]
        new_source, new_dest = ledger.transfer(
            source, [], "Valves", "units", 3, "South Store"
        )
        self.assertEqual(new_source, [])
        self.assertEqual(new_dest[0]["amount"], 3)
        self.assertEqual(new_dest[0]["location"], "South Store")
        self.assertNotEqual(new_dest[0]["id"], "s1")

    def test_transfer_insufficient_leaves_both_untouched(self):
        source = [{"id": "s1", "name": "Valves", "unit": "units", "amount": 2}]
        dest = []
        with self.assertRaises(InsufficientQuantity):
            ledger.transfer(source, dest, "Valves", "units", 3, "South Store")
        self.assertEqual(source[0]["amount"], 2)
        self.assertEqual(dest, [])


class ParseAmountTestCase(unittest.TestCase):
    def test_accepts_numeric_strings(self):
        self.assertEqual(ledger.parse_amount("12"), 12.0)
        self.assertEqual(ledger.parse_amount(" 1.5 "), 1.5)

    def test_whole_amounts_become_ints(self):
        self.assertIsInstance(ledger.parse_amount("12"), int)
        self.assertIsInstance(ledger.parse_amount(2.5), float)
        self.assertIsInstance(ledger.normalize_amount(0.1 + 0.2 + 0.7), int)

    def test_rejects_amounts_below_precision(self):
        with self.assertRaises(InvalidAmount):
            ledger.parse_amount("1e-12")

    def test_new_entry_ids_are_unique(self):
        ids = {ledger.new_entry_id() for _ in range(100)}
        self.assertEqual(len(ids), 100)
