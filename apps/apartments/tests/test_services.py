import pytest
from datetime import date
from decimal import Decimal
from django.core.exceptions import ValidationError
from apps.apartments.models import Apartment, Room, Partner, PartnerAgreement, PartnerType, Expense, ExpenseCategory
from apps.apartments.services import (
    get_apartment_by_id,
    get_room,
    record_expense,
    get_expenses,
    remove_system_expenses,
)
from apps.apartments.exceptions import (
    ApartmentNotFoundError,
    RoomNotFoundError,
    InvalidExpenseError,
)


@pytest.mark.django_db
class TestLookups:

    def test_get_apartment_by_id(self, apartment):
        assert get_apartment_by_id(apartment_id=apartment.id) == apartment

    def test_missing_apartment(self):
        other = Apartment(name='Unsaved')
        with pytest.raises(ApartmentNotFoundError):
            get_apartment_by_id(apartment_id=other.id)

    def test_room_must_belong_to_apartment(self, room, invested_apartment):
        assert get_room(apartment_id=room.apartment_id, room_id=room.id) == room
        with pytest.raises(RoomNotFoundError):
            get_room(apartment_id=invested_apartment.id, room_id=room.id)

    def test_rooms_ordered_by_position(self, apartment):
        Room.objects.create(apartment=apartment, room_number='3', position=3)
        Room.objects.create(apartment=apartment, room_number='1', position=1)
        Room.objects.create(apartment=apartment, room_number='2', position=2)

        assert [r.room_number for r in apartment.rooms.all()] == ['1', '2', '3']


@pytest.mark.django_db
class TestPartnerAgreements:

    def test_total_partner_percentage(self, apartment, partners):
        assert apartment.total_partner_percentage() == Decimal('30')

    def test_percentages_cannot_exceed_hundred(self, apartment, partners):
        third = Partner.objects.create(name='Omar')
        agreement = PartnerAgreement(apartment=apartment, partner=third, percentage=Decimal('75'))

        with pytest.raises(ValidationError):
            agreement.full_clean()

    def test_exactly_hundred_allowed(self, apartment, partners):
        third = Partner.objects.create(name='Omar')
        agreement = PartnerAgreement(apartment=apartment, partner=third, percentage=Decimal('70'))
        agreement.full_clean()

    def test_company_owner_percentages_counted_separately(self, apartment, partners):
        owner = Partner.objects.create(name='Omar')
        agreement = PartnerAgreement(
            apartment=apartment,
            partner=owner,
            percentage=Decimal('90'),
            partner_type=PartnerType.COMPANY_OWNER,
        )
        agreement.full_clean()

    def test_agreements_default_to_investor(self, apartment, partners):
        assert set(apartment.partner_agreements.values_list('partner_type', flat=True)) == {
            PartnerType.INVESTOR
        }


@pytest.mark.django_db
class TestExpenses:

    def test_record_expense(self, apartment):
        expense = record_expense(
            amount=Decimal('250'),
            currency='egp',
            date=date(2025, 1, 15),
            category=ExpenseCategory.CLEANING,
            apartment=apartment,
            description='Deep clean',
        )

        assert expense.currency == 'EGP'
        assert expense.is_system_generated is False
        assert expense.apartment == apartment

    def test_record_expense_rejects_non_positive(self, apartment):
        with pytest.raises(InvalidExpenseError):
            record_expense(amount=Decimal('0'), date=date(2025, 1, 1), apartment=apartment)

    def test_record_expense_rejects_unknown_category(self, apartment):
        with pytest.raises(InvalidExpenseError):
            record_expense(amount=Decimal('10'), date=date(2025, 1, 1), category='rent')

    def test_get_expenses_end_date_exclusive(self, apartment):
        record_expense(amount=Decimal('10'), date=date(2025, 1, 31), apartment=apartment)
        record_expense(amount=Decimal('20'), date=date(2025, 2, 1), apartment=apartment)

        january = get_expenses(start_date=date(2025, 1, 1), end_date=date(2025, 2, 1))
        assert [e.amount for e in january] == [Decimal('10')]

    def test_get_expenses_by_apartment(self, apartment, invested_apartment):
        record_expense(amount=Decimal('10'), date=date(2025, 1, 5), apartment=apartment)
        record_expense(amount=Decimal('20'), date=date(2025, 1, 5), apartment=invested_apartment)

        result = get_expenses(apartment_id=invested_apartment.id)
        assert [e.amount for e in result] == [Decimal('20')]

    def test_remove_system_expenses(self, apartment):
        record_expense(
            amount=Decimal('15'),
            date=date(2025, 1, 5),
            category=ExpenseCategory.TRANSFER_COMMISSION,
            apartment=apartment,
            is_system_generated=True,
            booking_reference='BK-20250105-0001',
        )
        record_expense(
            amount=Decimal('40'),
            date=date(2025, 1, 5),
            apartment=apartment,
            booking_reference='BK-20250105-0001',
        )

        assert remove_system_expenses(booking_reference='BK-20250105-0001') == 1
        assert [e.amount for e in Expense.objects.all()] == [Decimal('40.00')]

    def test_remove_system_expenses_needs_reference(self, apartment):
        record_expense(amount=Decimal('15'), date=date(2025, 1, 5), is_system_generated=True)

        assert remove_system_expenses(booking_reference='') == 0
        assert Expense.objects.count() == 1
