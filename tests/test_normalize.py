import unittest
from types import SimpleNamespace

from address_update.core.normalize import US_STATE_CODES, clean_zip, client_ip_from_request, normalize_state


class TestNormalizeState(unittest.TestCase):
    def test_every_state_name_maps_to_its_code(self):
        self.assertEqual(len(US_STATE_CODES), 50)
        for name, code in US_STATE_CODES.items():
            self.assertEqual(normalize_state(name), code)

    def test_spot_checks(self):
        self.assertEqual(normalize_state("California"), "CA")
        self.assertEqual(normalize_state("New Hampshire"), "NH")
        self.assertEqual(normalize_state("West Virginia"), "WV")

    def test_two_characters_are_upper_cased_regardless_of_table(self):
        self.assertEqual(normalize_state("il"), "IL")
        self.assertEqual(normalize_state("zz"), "ZZ")
        self.assertEqual(normalize_state("1a"), "1A")

    def test_unknown_text_passes_through_upper_cased(self):
        self.assertEqual(normalize_state("Ontario"), "ONTARIO")
        self.assertEqual(normalize_state("california"), "CALIFORNIA")
        self.assertEqual(normalize_state("Puerto Rico"), "PUERTO RICO")

    def test_empty_stays_empty(self):
        self.assertEqual(normalize_state(""), "")


class TestCleanZip(unittest.TestCase):
    def test_strips_spaces_and_letters(self):
        self.assertEqual(clean_zip(" 90 210 "), "90210")
        self.assertEqual(clean_zip("ZIP: 60616"), "60616")

    def test_keeps_zip_plus_four_hyphen(self):
        self.assertEqual(clean_zip("62704-1234"), "62704-1234")

    def test_handles_none(self):
        self.assertEqual(clean_zip(None), "")


class TestClientIpFromRequest(unittest.TestCase):
    def test_client_ip_from_request_uses_xff(self):
        req = SimpleNamespace(headers={"x-forwarded-for": "203.0.113.5, 10.0.0.1"}, client=None)
        self.assertEqual(client_ip_from_request(req), "203.0.113.5")

    def test_client_ip_from_request_falls_back_to_client(self):
        client = SimpleNamespace(host="198.51.100.2")
        req = SimpleNamespace(headers={}, client=client)
        self.assertEqual(client_ip_from_request(req), "198.51.100.2")

    def test_client_ip_from_request_defaults_when_missing(self):
        req = SimpleNamespace(headers={}, client=None)
        self.assertEqual(client_ip_from_request(req), "0.0.0.0")


if __name__ == "__main__":
    unittest.main()
