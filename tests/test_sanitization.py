"""Tests para vending/utils/sanitization.py"""
from vending.utils.sanitization import (
    is_valid_email,
    sanitize_address,
    sanitize_concept,
    sanitize_email,
    sanitize_name,
    sanitize_notes,
    sanitize_text,
    sanitize_url,
)


class TestSanitizeText:
    def test_removes_script_tags(self):
        result = sanitize_text("<script>alert('xss')</script>")
        assert "<script>" not in result
        assert "</script>" not in result

    def test_strips_whitespace(self):
        assert sanitize_text("  hola  ") == "hola"

    def test_handles_none(self):
        assert sanitize_text(None) == ""

    def test_handles_empty_string(self):
        assert sanitize_text("") == ""

    def test_preserves_normal_text(self):
        assert sanitize_text("Tienda Don José") == "Tienda Don José"

    def test_truncates(self):
        assert sanitize_text("abcdef", max_length=3) == "abc"


class TestSanitizeNotes:
    def test_truncates_long_text(self):
        assert len(sanitize_notes("a" * 800)) == 500

    def test_preserves_normal_notes(self):
        note = "Llave en la caja fuerte del encargado"
        assert sanitize_notes(note) == note


class TestSanitizeName:
    def test_strips_whitespace(self):
        assert sanitize_name("  Plaza Norte  ") == "Plaza Norte"

    def test_preserves_accents(self):
        assert sanitize_name("Cafetería Muñoz") == "Cafetería Muñoz"

    def test_removes_html(self):
        assert sanitize_name("<b>Peluchera</b>") == "Peluchera"


class TestSanitizeOtherFields:
    def test_address_limit(self):
        assert len(sanitize_address("x" * 400)) == 300

    def test_concept_limit(self):
        assert len(sanitize_concept("x" * 400)) == 200

    def test_url_accepts_https(self):
        url = "https://maps.google.com/?q=1,2"
        assert sanitize_url(url) == url

    def test_url_rejects_javascript(self):
        assert sanitize_url("javascript:alert(1)") == ""

    def test_email_lowercase(self):
        assert sanitize_email("  Ana@Test.COM ") == "ana@test.com"


class TestIsValidEmail:
    def test_valid(self):
        assert is_valid_email("ana@test.com") is True

    def test_invalid(self):
        assert is_valid_email("ana@") is False
        assert is_valid_email("") is False
