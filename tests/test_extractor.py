"""Tests for contact extraction (grouped and legacy flattened passes).

All inputs are inline HTML fixtures; no network access is involved.
"""

from __future__ import annotations

from contact_scraper.scraper.extractor import extract_contacts
from contact_scraper.scraper.models import ContactRecord, ExtractionResult, Person


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_COMPANY_PAGE = """\
<!DOCTYPE html>
<html>
<head><title>Yritys Oy</title></head>
<body>
  <div class="yhteystiedot">
    <p>Matti Meikäläinen, Toimitusjohtaja, 040 123 4567</p>
    <a href="mailto:Info@Example.FI">Lähetä sähköpostia</a>
  </div>
</body>
</html>
"""

_TEAM_NAMES = [
    "Liisa Korhonen", "Pekka Nieminen", "Anna Virtanen", "Jussi Lahtinen",
    "Kari Mäkinen", "Sari Heikkinen", "Timo Koskinen", "Minna Järvinen",
    "Juha Lehtonen", "Tiina Saarinen", "Antti Salminen", "Hanna Laine",
]


def _team_page(names: list[str]) -> str:
    cards = "\n".join(
        f'<div class="team-member"><h3>{n}</h3><p>asiantuntija</p></div>'
        for n in names
    )
    return f"<html><body>{cards}</body></html>"


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------

class TestCompanyPage:
    def test_grouped_contact(self) -> None:
        result = extract_contacts(_COMPANY_PAGE)
        assert result.contacts == [
            ContactRecord(
                name="Matti Meikäläinen",
                title="toimitusjohtaja",
                phone="+358401234567",
                email="info@example.fi",
            )
        ]

    def test_flattened_emails_are_lowercased(self) -> None:
        result = extract_contacts(_COMPANY_PAGE)
        assert result.email_addresses == ["info@example.fi"]

    def test_flattened_phones_are_normalized(self) -> None:
        result = extract_contacts(_COMPANY_PAGE)
        assert "+358401234567" in result.phone_numbers

    def test_unwrapped_body_text_yields_contact(self) -> None:
        html = (
            '<html><body><a href="mailto:Info@Example.FI">Info@Example.FI</a>'
            "<p>Matti Meikäläinen, Toimitusjohtaja, 040 123 4567</p></body></html>"
        )
        result = extract_contacts(html)
        assert result.contacts == [
            ContactRecord(
                name="Matti Meikäläinen",
                title="toimitusjohtaja",
                phone="+358401234567",
                email="info@example.fi",
            )
        ]
        assert result.email_addresses == ["info@example.fi"]
        assert "+358401234567" in result.phone_numbers

    def test_specific_region_wins_over_body(self) -> None:
        html = (
            '<html><body><p>Soita: 09 765 4321</p><div class="team-member">'
            "<h3>Liisa Korhonen</h3><p>myyntipäällikkö</p></div></body></html>"
        )
        contacts = extract_contacts(html).contacts
        # The team card has no phone of its own; the body-level number
        # must not be attached to it.
        assert contacts == [ContactRecord(name="Liisa Korhonen", title="myyntipäällikkö")]

    def test_empty_html_does_not_raise(self) -> None:
        result = extract_contacts("")
        assert result == ExtractionResult()


# ---------------------------------------------------------------------------
# Grouped pass
# ---------------------------------------------------------------------------

class TestGroupedContacts:
    def test_fields_are_not_cross_associated(self) -> None:
        html = """\
<html><body>
  <div class="person-card"><h3>Anna Virtanen</h3><p>anna@yritys.fi</p></div>
  <div class="person-card"><h3>Jussi Lahtinen</h3><p>050 987 6543</p></div>
</body></html>
"""
        contacts = extract_contacts(html).contacts
        assert contacts == [
            ContactRecord(name="Anna Virtanen", title="unknown", email="anna@yritys.fi"),
            ContactRecord(name="Jussi Lahtinen", title="unknown", phone="+358509876543"),
        ]

    def test_first_encountered_title_wins_on_duplicate_name(self) -> None:
        html = """\
<html><body>
  <div class="team-member"><h3>Liisa Korhonen</h3><p>myyntipäällikkö</p><p>040 111 2222</p></div>
  <div class="staff-member"><h3>Liisa Korhonen</h3><p>asiantuntija</p></div>
</body></html>
"""
        contacts = extract_contacts(html).contacts
        assert len(contacts) == 1
        assert contacts[0].title == "myyntipäällikkö"
        assert contacts[0].phone == "+358401112222"

    def test_contacts_are_capped_at_ten(self) -> None:
        contacts = extract_contacts(_team_page(_TEAM_NAMES)).contacts
        assert len(contacts) == 10
        assert [c.name for c in contacts] == _TEAM_NAMES[:10]

    def test_footer_landmark_is_scanned(self) -> None:
        html = (
            "<html><body><footer><address>Kari Mäkinen<br>puh. 09 123 4567"
            "</address></footer></body></html>"
        )
        contacts = extract_contacts(html).contacts
        assert contacts == [ContactRecord(name="Kari Mäkinen", phone="+35891234567")]

    def test_catch_all_finds_unclassed_region(self) -> None:
        html = "<html><body><article><p>Pekka Nieminen</p><p>pekka@yritys.fi</p></article></body></html>"
        contacts = extract_contacts(html).contacts
        assert contacts == [ContactRecord(name="Pekka Nieminen", email="pekka@yritys.fi")]

    def test_catch_all_needs_contact_details(self) -> None:
        html = "<html><body><article><p>Pekka Nieminen kirjoitti blogiin.</p></article></body></html>"
        assert extract_contacts(html).contacts == []

    def test_tel_link_used_when_text_has_no_number(self) -> None:
        html = (
            '<html><body><div class="contact-card"><h3>Sari Heikkinen</h3>'
            '<a href="tel:+358451234567">soita</a></div></body></html>'
        )
        contacts = extract_contacts(html).contacts
        assert contacts[0].phone == "+358451234567"


# ---------------------------------------------------------------------------
# Legacy flattened pass
# ---------------------------------------------------------------------------

class TestLegacyFields:
    def test_phones_from_tel_links_and_text(self) -> None:
        html = """\
<html><body>
  <a href="tel:09-765-4321">Vaihde</a>
  <p>Myynti 040 123 4567</p>
</body></html>
"""
        phones = extract_contacts(html).phone_numbers
        assert phones == ["+35897654321", "+358401234567"]

    def test_phones_are_deduplicated(self) -> None:
        html = (
            '<html><body><a href="tel:+358401234567">040 123 4567</a>'
            "<p>040-123-4567</p></body></html>"
        )
        assert extract_contacts(html).phone_numbers == ["+358401234567"]

    def test_mailto_query_string_is_stripped(self) -> None:
        html = '<html><body><a href="mailto:myynti@yritys.fi?subject=Tarjous">Myynti</a></body></html>'
        assert extract_contacts(html).email_addresses == ["myynti@yritys.fi"]

    def test_scripts_are_ignored(self) -> None:
        html = (
            "<html><body><script>var demo = 'Fake Person 040 123 4567 x@y.fi';</script>"
            "<p>Tervetuloa</p></body></html>"
        )
        result = extract_contacts(html)
        assert result.phone_numbers == []
        assert result.email_addresses == []

    def test_people_from_contact_sections(self) -> None:
        html = """\
<html><body>
  <section class="contact">
    <p>Liisa Korhonen, myyntipäällikkö</p>
    <p>Pekka Nieminen, asiantuntija</p>
  </section>
</body></html>
"""
        result = extract_contacts(html)
        # Every name in the section shares the section's first title keyword.
        assert result.people == [
            Person(name="Liisa Korhonen", title="myyntipäällikkö"),
            Person(name="Pekka Nieminen", title="myyntipäällikkö"),
        ]
        # The grouped view takes one contact per region, so the views differ.
        assert [c.name for c in result.contacts] == ["Liisa Korhonen"]

    def test_people_are_capped_at_ten(self) -> None:
        paragraphs = "".join(f"<p>{n}, asiantuntija</p>" for n in _TEAM_NAMES)
        html = f'<html><body><div class="contact">{paragraphs}</div></body></html>'
        people = extract_contacts(html).people
        assert len(people) == 10
        assert people[0].name == _TEAM_NAMES[0]
