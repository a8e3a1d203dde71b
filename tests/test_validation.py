"""
Tests for record validation and worksheet cell coercion.
"""

from datetime import date, datetime, time

import pytest

from services.errors import ValidationError
from services.validation_service import (
    cell_choice, cell_date, cell_positive_int, cell_text, cell_time, trim_row,
    validate_customer, validate_customer_update, validate_job, validate_job_update
)


class TestRecordValidation:
    """Test the shared record schemas."""

    def test_camel_case_keys_are_accepted(self):
        customer = validate_customer({
            'companyName': 'Acme Co', 'contactPerson': 'Jane', 'email': '',
            'phone': '', 'address': '', 'customerType': 'Residential',
        })

        assert customer.company_name == 'Acme Co'
        assert customer.customer_type == 'Residential'
        assert customer.status == 'Active'

    def test_blank_contact_person_accepted(self):
        customer = validate_customer({
            'company_name': 'Acme Co', 'contact_person': '', 'email': '',
            'phone': '', 'address': '', 'customer_type': 'Commercial',
        })

        assert customer.contact_person == ''

    def test_missing_required_field_lists_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_customer({'company_name': 'Acme Co'})

        assert len(exc_info.value.errors) >= 4
        assert all({'loc', 'msg'} <= set(err) for err in exc_info.value.errors)

    def test_job_price_normalised(self):
        job = validate_job({
            'customer_id': 'c1', 'title': 'Check', 'job_type': 'Inspection',
            'scheduled_date': '2025-01-15', 'scheduled_time': '09:00', 'price': ' 150 ',
        })

        assert job.price == '150'
        assert job.scheduled_date == date(2025, 1, 15)
        assert job.status == 'Scheduled'

    def test_blank_price_becomes_none(self):
        job = validate_job({
            'customer_id': 'c1', 'title': 'Check', 'job_type': 'Inspection',
            'scheduled_date': '2025-01-15', 'scheduled_time': '09:00', 'price': '',
        })

        assert job.price is None

    @pytest.mark.parametrize('price', ['abc', 'NaN', 'Infinity', True, '1.005', '100000000'])
    def test_invalid_price_rejected(self, price):
        with pytest.raises(ValidationError):
            validate_job({
                'customer_id': 'c1', 'title': 'Check', 'job_type': 'Inspection',
                'scheduled_date': '2025-01-15', 'scheduled_time': '09:00', 'price': price,
            })

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            validate_job({
                'customer_id': 'c1', 'title': 'Check', 'job_type': 'Inspection',
                'scheduled_date': '2025-01-15', 'scheduled_time': '09:00',
                'estimated_duration': -5,
            })

    def test_update_tracks_only_given_fields(self):
        update = validate_job_update({'status': 'Completed'})

        assert update.model_dump(exclude_unset=True) == {'status': 'Completed'}

    def test_update_rejects_null_required_field(self):
        with pytest.raises(ValidationError):
            validate_customer_update({'customer_type': None})

    def test_update_allows_clearing_optional_field(self):
        update = validate_customer_update({'next_due': None})

        assert update.model_dump(exclude_unset=True) == {'next_due': None}


class TestCellCoercion:
    """Test worksheet cell helpers."""

    def test_trim_row_drops_trailing_blanks(self):
        assert trim_row(('a', None, 'b', '', None)) == ['a', None, 'b']
        assert trim_row((None, ' ')) == []

    def test_cell_text(self):
        assert cell_text(None) == ''
        assert cell_text(None, 'x') == 'x'
        assert cell_text(150.0) == '150'
        assert cell_text(99.5) == '99.5'
        assert cell_text('  Acme  ') == 'Acme'

    def test_cell_choice(self):
        assert cell_choice('Industrial', ['Commercial', 'Industrial'], 'Commercial') == 'Industrial'
        assert cell_choice('industrial', ['Commercial', 'Industrial'], 'Commercial') == 'Commercial'
        assert cell_choice(None, ['Commercial'], 'Commercial') == 'Commercial'

    def test_cell_date(self):
        fallback = date(2025, 1, 15)
        assert cell_date(datetime(2024, 8, 1, 12, 0), fallback) == date(2024, 8, 1)
        assert cell_date(date(2024, 8, 1), fallback) == date(2024, 8, 1)
        assert cell_date('2024-08-01', fallback) == date(2024, 8, 1)
        assert cell_date('2024-08-01T10:00:00', fallback) == date(2024, 8, 1)
        assert cell_date(45292, fallback) == date(2024, 1, 1)
        assert cell_date('next week', fallback) == fallback
        assert cell_date(None, fallback) == fallback

    def test_cell_time(self):
        assert cell_time(time(14, 30), '09:00') == '14:30'
        assert cell_time('10:15', '09:00') == '10:15'
        assert cell_time(None, '09:00') == '09:00'

    def test_cell_positive_int(self):
        assert cell_positive_int('60', 30) == 60
        assert cell_positive_int(90.0, 30) == 90
        assert cell_positive_int('abc', 30) == 30
        assert cell_positive_int(0, 30) == 30
        assert cell_positive_int(-30, 60) == 60
        assert cell_positive_int('-5', 60) == 60
        assert cell_positive_int(float('nan'), 30) == 30
        assert cell_positive_int(None, 30) == 30
