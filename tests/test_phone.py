import unittest

from campsite_api.schemas.common import is_valid_thai_phone, normalize_thai_phone, validate_optional_thai_phone


class ThaiPhoneTests(unittest.TestCase):
    def test_accepts_mobile_and_landline_formats(self):
        for value in ("0812345678", "081-234-5678", "081 234 5678", "0612345678", "021234567", "02-123-4567"):
            with self.subTest(value=value):
                self.assertTrue(is_valid_thai_phone(value))

    def test_rejects_malformed_numbers(self):
        for value in ("12345678", "1812345678", "081234567", "abcdefghij", "0812-34-567", "", "01123456789"):
            with self.subTest(value=value):
                self.assertFalse(is_valid_thai_phone(value))

    def test_normalize_strips_separators(self):
        self.assertEqual(normalize_thai_phone(" 081-234 5678 "), "0812345678")
        self.assertEqual(normalize_thai_phone(None), "")

    def test_optional_validator(self):
        self.assertIsNone(validate_optional_thai_phone(None))
        self.assertIsNone(validate_optional_thai_phone("   "))
        self.assertEqual(validate_optional_thai_phone("081-234-5678"), "0812345678")
        with self.assertRaises(ValueError):
            validate_optional_thai_phone("12345")


if __name__ == "__main__":
    unittest.main()
