"""
iBuddy Backend — Form Validation Tests
========================================

What:  Field and cross-field validation of the user and mentee forms.

What we test:
    ✅ Agreement end date must be in the future and not before the start
    ✅ Emails are trimmed, lowercased and syntax-checked
    ✅ Required text fields reject blanks
    ✅ Country codes must name a real ISO 3166 country, stored uppercase
"""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from ibuddy.models.mentee import MenteeStatus
from ibuddy.schemas.mentee import MenteeForm, NoteForm, StatusForm
from ibuddy.schemas.user import UserCreate

TODAY = date.today()


def user_fields(**overrides):
    fields = {
        "email": "jane@example.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "agreement_start_date": TODAY,
        "agreement_end_date": TODAY + timedelta(days=30),
        "password": "long-enough",
    }
    fields.update(overrides)
    return fields


def mentee_fields(**overrides):
    fields = {
        "buddy_email": "buddy@example.com",
        "first_name": "Ana",
        "last_name": "Silva",
        "email": "ana@uni.example.org",
        "country_code": "pt",
        "home_university": "Universidade de Lisboa",
        "host_faculty": "Medicine",
        "gender": "female",
        "degree": "bachelor",
        "agreement_start_date": TODAY,
        "agreement_end_date": TODAY + timedelta(days=30),
    }
    fields.update(overrides)
    return fields


class TestAgreementWindow:

    def test_start_date_may_be_in_the_past(self):
        form = UserCreate(**user_fields(agreement_start_date=TODAY - timedelta(days=400)))
        assert form.agreement_start_date < TODAY

    @pytest.mark.parametrize("end", [TODAY, TODAY - timedelta(days=1)])
    def test_end_date_must_be_in_the_future(self, end):
        with pytest.raises(ValidationError, match="End date must be in the future"):
            UserCreate(**user_fields(agreement_start_date=end - timedelta(days=10), agreement_end_date=end))

    def test_end_date_must_not_precede_start(self):
        with pytest.raises(ValidationError):
            MenteeForm(**mentee_fields(
                agreement_start_date=TODAY + timedelta(days=20),
                agreement_end_date=TODAY + timedelta(days=10),
            ))


class TestUserForm:

    def test_email_is_normalized(self):
        assert UserCreate(**user_fields(email="  Jane@Example.COM ")).email == "jane@example.com"

    @pytest.mark.parametrize("email", [
        "",
        "jane",
        "jane@",
        "jane@example",
        "ja ne@example.com",
        "jane..doe@example.com",
        "jane@example..com",
        ".jane@example.com",
        "<x>@y.z",
    ])
    def test_invalid_email(self, email):
        with pytest.raises(ValidationError):
            UserCreate(**user_fields(email=email))

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError, match="First name is required"):
            UserCreate(**user_fields(first_name="   "))

    def test_short_password_is_rejected(self):
        with pytest.raises(ValidationError):
            UserCreate(**user_fields(password="short"))


class TestMenteeForm:

    def test_country_code_is_uppercased(self):
        assert MenteeForm(**mentee_fields()).country_code == "PT"

    @pytest.mark.parametrize("code", ["p", "por", "1a", "ZZ", "xx"])
    def test_invalid_country_code(self, code):
        with pytest.raises(ValidationError):
            MenteeForm(**mentee_fields(country_code=code))

    def test_unknown_country_reports_invalid_country(self):
        with pytest.raises(ValidationError, match="Invalid country"):
            MenteeForm(**mentee_fields(country_code="zz"))

    def test_buddy_email_is_validated(self):
        with pytest.raises(ValidationError):
            MenteeForm(**mentee_fields(buddy_email="buddy..x@example.com"))
        assert MenteeForm(**mentee_fields(buddy_email=" Buddy@Example.com")).buddy_email == "buddy@example.com"

    def test_blank_host_faculty_is_rejected(self):
        with pytest.raises(ValidationError, match="Host faculty is required"):
            MenteeForm(**mentee_fields(host_faculty=""))

    def test_unknown_degree_is_rejected(self):
        with pytest.raises(ValidationError):
            MenteeForm(**mentee_fields(degree="phd"))

    def test_status_form_accepts_known_values_only(self):
        assert StatusForm(status="in_touch").status is MenteeStatus.IN_TOUCH
        with pytest.raises(ValidationError):
            StatusForm(status="lost")

    def test_blank_note_is_rejected(self):
        with pytest.raises(ValidationError, match="Note is required"):
            NoteForm(content="  ")
