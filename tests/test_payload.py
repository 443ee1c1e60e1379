import copy
import unittest

from address_update.services.payload import DEMO_PAYLOAD, decode_payload, extract_customer_payload
from fakes import SAMPLE_PAYLOAD


class TestExtractCustomerPayload(unittest.TestCase):
    def test_array_with_output(self):
        extracted = extract_customer_payload(SAMPLE_PAYLOAD)
        self.assertEqual(extracted["customer_name"], "Jane Doe")

    def test_object_with_output(self):
        extracted = extract_customer_payload({"output": SAMPLE_PAYLOAD[0]["output"]})
        self.assertEqual(len(extracted["subscriptions"]), 2)

    def test_direct_object(self):
        extracted = extract_customer_payload(SAMPLE_PAYLOAD[0]["output"])
        self.assertEqual(extracted["email"], "jane.doe@example.com")

    def test_rejects_missing_subscriptions(self):
        self.assertIsNone(extract_customer_payload({"customer_name": "Jane"}))

    def test_rejects_missing_customer_name(self):
        self.assertIsNone(extract_customer_payload([{"output": {"subscriptions": []}}]))

    def test_rejects_other_shapes(self):
        self.assertIsNone(extract_customer_payload(None))
        self.assertIsNone(extract_customer_payload([]))
        self.assertIsNone(extract_customer_payload([{"data": {}}]))
        self.assertIsNone(extract_customer_payload({"foo": "bar"}))
        self.assertIsNone(extract_customer_payload("customer_name"))

    def test_empty_subscription_list_is_accepted(self):
        extracted = extract_customer_payload({"customer_name": "Jane", "subscriptions": []})
        self.assertEqual(extracted["subscriptions"], [])


class TestDecodePayload(unittest.TestCase):
    def test_decodes_customer_metadata(self):
        decoded = decode_payload(SAMPLE_PAYLOAD)
        customer = decoded.customer
        self.assertEqual(customer.customer_name, "Jane Doe")
        self.assertEqual(customer.shopify_id, 7818727325739)
        self.assertEqual(customer.recharge_id, 211519611)
        self.assertEqual(customer.email, "jane.doe@example.com")
        self.assertEqual(customer.date_time, "2025-10-03T13:06:21-05:00")

    def test_decodes_subscriptions_with_display_strings(self):
        decoded = decode_payload(SAMPLE_PAYLOAD)
        ids = [s.id for s in decoded.subscriptions]
        self.assertEqual(ids, ["698319426", "698319427"])
        first = decoded.subscriptions[0]
        self.assertEqual(first.name, "Jane")
        self.assertEqual(first.display, "742 Evergreen Terrace, Suite 12A\nSpringfield, CA 90210")
        self.assertEqual(first.address.province, "CA")

    def test_absent_metadata_is_none(self):
        decoded = decode_payload({"customer_name": "Jane", "subscriptions": []})
        self.assertIsNone(decoded.customer.shopify_id)
        self.assertIsNone(decoded.customer.recharge_id)
        self.assertIsNone(decoded.customer.email)
        self.assertIsNone(decoded.customer.date_time)

    def test_shopify_id_wins_over_customer_id(self):
        payload = copy.deepcopy(SAMPLE_PAYLOAD[0]["output"])
        payload["shopify_id"] = "42"
        self.assertEqual(decode_payload(payload).customer.shopify_id, 42)

    def test_skips_subscriptions_without_id(self):
        payload = {"customer_name": "Jane", "subscriptions": [{"recipient_name": "x"}, "junk"]}
        self.assertEqual(decode_payload(payload).subscriptions, [])

    def test_invalid_payload_decodes_to_none(self):
        self.assertIsNone(decode_payload({"hello": "world"}))

    def test_demo_payload_parses_display_strings(self):
        decoded = decode_payload(DEMO_PAYLOAD)
        second = decoded.subscriptions[1]
        self.assertEqual(second.address.address1, "456 Oak Avenue, Suite 12")
        self.assertEqual(second.address.city, "Chicago")
        self.assertEqual(second.address.zip, "60616")


if __name__ == "__main__":
    unittest.main()
