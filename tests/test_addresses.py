import unittest

from address_update.services.addresses import Address, EditableAddress, street_from_suggestion


class TestAddressFromDisplay(unittest.TestCase):
    def test_parses_street_city_state_zip(self):
        address = Address.from_display("123 Maple Street, Apt 4B\nSpringfield, IL 62704")
        self.assertEqual(address.address1, "123 Maple Street, Apt 4B")
        self.assertEqual(address.city, "Springfield")
        self.assertEqual(address.province, "IL")
        self.assertEqual(address.zip, "62704")

    def test_full_state_name_is_normalized(self):
        address = Address.from_display("1 Main St\nSpringfield, California 90210")
        self.assertEqual(address.province, "CA")
        self.assertEqual(address.zip, "90210")

    def test_missing_second_line_leaves_fields_empty(self):
        address = Address.from_display("1 Main St")
        self.assertEqual(address.address1, "1 Main St")
        self.assertEqual((address.city, address.province, address.zip), ("", "", ""))

    def test_missing_comma_puts_everything_in_city(self):
        address = Address.from_display("1 Main St\nSpringfield IL 62704")
        self.assertEqual(address.city, "Springfield IL 62704")
        self.assertEqual(address.province, "")
        self.assertEqual(address.zip, "")

    def test_multi_word_state_splits_positionally(self):
        address = Address.from_display("1 Main St\nAlbany, New York 12207")
        self.assertEqual(address.province, "NEW")
        self.assertEqual(address.zip, "York")


class TestAddressFromPayload(unittest.TestCase):
    def test_structured_fields_survive_ambiguous_display(self):
        address = Address.from_payload({
            "address1": "1 State St",
            "city": "Albany",
            "province": "New York",
            "zip": "12207",
            "country_code": "us",
        })
        self.assertEqual(address.province, "NY")
        self.assertEqual(address.country_code, "US")
        self.assertEqual(address.display, "1 State St\nAlbany, NY 12207")

    def test_none_values_become_empty(self):
        address = Address.from_payload({"address1": None, "zip": 90210})
        self.assertEqual(address.address1, "")
        self.assertEqual(address.zip, "90210")
        self.assertEqual(address.country_code, "US")

    def test_to_outbound_shape(self):
        address = Address(address1="1 Main St", city="Springfield", province="IL", zip="62704")
        self.assertEqual(address.to_outbound(), {
            "address1": "1 Main St",
            "city": "Springfield",
            "province": "IL",
            "zip": "62704",
            "country_code": "US",
        })


class TestEditableAddress(unittest.TestCase):
    def test_from_address_defaults_country(self):
        editable = EditableAddress.from_address(Address(address1="1 Main St", city="Town", province="il", zip="1"))
        self.assertEqual(editable.country, "United States")
        self.assertEqual(editable.state, "IL")

    def test_missing_fields_ignores_country(self):
        editable = EditableAddress(street="1 Main St", city="", state="IL", zip="", country="")
        self.assertEqual(editable.missing_fields(), ["city", "zip"])
        self.assertFalse(editable.is_complete())

    def test_complete_address(self):
        editable = EditableAddress(street="1 Main St", city="Town", state="IL", zip="62704", country="")
        self.assertTrue(editable.is_complete())
        self.assertEqual(editable.to_outbound()["country_code"], "US")


class TestStreetFromSuggestion(unittest.TestCase):
    def test_takes_text_before_first_comma(self):
        label = "1600, Pennsylvania Avenue Northwest, Washington, District of Columbia, 20500, United States"
        self.assertEqual(street_from_suggestion(label), "1600")

    def test_strips_whitespace(self):
        self.assertEqual(street_from_suggestion("  12 Oak Lane , Springfield"), "12 Oak Lane")

    def test_without_comma_returns_whole_label(self):
        self.assertEqual(street_from_suggestion("12 Oak Lane"), "12 Oak Lane")


if __name__ == "__main__":
    unittest.main()
