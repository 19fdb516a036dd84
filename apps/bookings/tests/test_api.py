import pytest
from datetime import date, timedelta
from decimal import Decimal
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.bookings.models import Booking, BookingStatus


@pytest.fixture
def booking_payload(room):
    return {
        'apartment': str(room.apartment_id),
        'room': str(room.id),
        'guest_name': 'Lena Fischer',
        'guest_email': 'lena@example.com',
        'check_in': '2025-03-01',
        'check_out': '2025-03-06',
        'total_booking_price': '500.00',
        'currency': 'USD',
        'source': 'Booking.com',
        'platform_commission': '50.00',
        'single_payment': {'amount': '200.00', 'currency': 'USD', 'method': 'card'},
    }


@pytest.mark.django_db
class TestBookingCreate:
    """Tests for POST /api/bookings/"""

    def test_requires_authentication(self, api_client, booking_payload):
        response = api_client.post(reverse('bookings:booking-list'), booking_payload, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_booking(self, authenticated_client, booking_payload):
        response = authenticated_client.post(reverse('bookings:booking-list'), booking_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['guest_name'] == 'Lena Fischer'
        assert response.data['number_of_nights'] == 5
        assert response.data['reference'].startswith('BK-')
        assert len(response.data['payments']) == 1
        assert response.data['payments'][0]['method'] == 'card'

    def test_external_commission_zeroed(self, authenticated_client, booking_payload):
        booking_payload['source'] = 'External'
        response = authenticated_client.post(reverse('bookings:booking-list'), booking_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.data['platform_commission']) == Decimal('0.00')

    def test_overlap_returns_conflict(self, authenticated_client, booking_payload, booking):
        booking_payload['check_in'] = '2025-03-04'
        booking_payload['check_out'] = '2025-03-08'
        response = authenticated_client.post(reverse('bookings:booking-list'), booking_payload, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert 'error' in response.data
        conflict = response.data['conflicting_booking']
        assert conflict['id'] == str(booking.id)
        assert conflict['reference'] == booking.reference
        assert conflict['check_in'] == '2025-03-01'
        assert conflict['check_out'] == '2025-03-06'
        assert Booking.objects.count() == 1

    def test_back_to_back_accepted(self, authenticated_client, booking_payload, booking):
        booking_payload['check_in'] = '2025-03-06'
        booking_payload['check_out'] = '2025-03-08'
        response = authenticated_client.post(reverse('bookings:booking-list'), booking_payload, format='json')
        assert response.status_code == status.HTTP_201_CREATED

    def test_invalid_dates_rejected(self, authenticated_client, booking_payload):
        booking_payload['check_out'] = booking_payload['check_in']
        response = authenticated_client.post(reverse('bookings:booking-list'), booking_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'check_out' in response.data

    def test_room_of_other_apartment_rejected(self, authenticated_client, booking_payload, invested_room):
        booking_payload['room'] = str(invested_room.id)
        response = authenticated_client.post(reverse('bookings:booking-list'), booking_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_unknown_transfer_origin_rejected(self, authenticated_client, booking_payload):
        booking_payload['origin_room'] = '00000000-0000-0000-0000-000000000000'
        response = authenticated_client.post(reverse('bookings:booking-list'), booking_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data
        assert not Booking.objects.exists()


@pytest.mark.django_db
class TestBookingListAndDetail:
    """Tests for GET /api/bookings/ and /api/bookings/{id}/"""

    def test_list_filtered_by_room(self, authenticated_client, make_booking, room, other_room):
        make_booking()
        make_booking(room=other_room, guest_name='Other')

        response = authenticated_client.get(reverse('bookings:booking-list'), {'room': str(other_room.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['guest_name'] == 'Other'

    def test_list_filtered_by_guest(self, authenticated_client, make_booking):
        make_booking(guest_name='Yuki Tanaka')

        response = authenticated_client.get(reverse('bookings:booking-list'), {'guest': 'yuki'})
        assert response.data['count'] == 1

    def test_detail_has_effective_status(self, authenticated_client, booking):
        response = authenticated_client.get(reverse('bookings:booking-detail', args=[booking.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['effective_status'] == 'completed'
        assert response.data['status'] == 'confirmed'


@pytest.mark.django_db
class TestBookingUpdate:
    """Tests for PATCH /api/bookings/{id}/"""

    def test_update_notes(self, authenticated_client, booking):
        url = reverse('bookings:booking-detail', args=[booking.id])
        response = authenticated_client.patch(url, {'notes': 'Vegetarian breakfast'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['notes'] == 'Vegetarian breakfast'

    def test_update_into_conflict(self, authenticated_client, booking, make_booking, other_room):
        other = make_booking(room=other_room, guest_name='Other')
        url = reverse('bookings:booking-detail', args=[other.id])
        response = authenticated_client.patch(url, {'room': str(booking.room_id)}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['conflicting_booking']['id'] == str(booking.id)

    def test_update_cancelled_rejected(self, authenticated_client, booking):
        booking.status = BookingStatus.CANCELLED
        booking.save()

        url = reverse('bookings:booking-detail', args=[booking.id])
        response = authenticated_client.patch(url, {'notes': 'x'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestBookingActions:
    """Tests for extend, end_early, cancel, distribution and payment_summary."""

    def test_extend(self, authenticated_client, booking):
        url = reverse('bookings:booking-extend', args=[booking.id])
        response = authenticated_client.post(
            url, {'extension_days': 2, 'extension_amount': '200.00'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['check_out'] == '2025-03-08'
        assert Decimal(response.data['total_booking_price']) == Decimal('700.00')
        assert len(response.data['extensions']) == 1

    def test_extend_conflict(self, authenticated_client, booking, make_booking):
        blocker = make_booking(guest_name='Next', check_in=date(2025, 3, 7), check_out=date(2025, 3, 9))
        url = reverse('bookings:booking-extend', args=[booking.id])
        response = authenticated_client.post(
            url, {'extension_days': 2, 'extension_amount': '200.00'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['conflicting_booking']['id'] == str(blocker.id)
        booking.refresh_from_db()
        assert booking.check_out == date(2025, 3, 6)

    def test_extend_requires_positive_values(self, authenticated_client, booking):
        url = reverse('bookings:booking-extend', args=[booking.id])
        response = authenticated_client.post(
            url, {'extension_days': 0, 'extension_amount': '0'}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_end_early(self, authenticated_client, make_booking):
        booking = make_booking(
            check_in=date(2025, 5, 1),
            check_out=date(2025, 5, 11),
            total_booking_price=Decimal('100.00'),
        )
        url = reverse('bookings:booking-end-early', args=[booking.id])
        response = authenticated_client.post(url, {'actual_check_out': '2025-05-07'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'ended-early'
        assert response.data['effective_status'] == 'ended-early'
        assert Decimal(response.data['refund_amount']) == Decimal('40.00')

    def test_cancel(self, authenticated_client, booking):
        url = reverse('bookings:booking-cancel', args=[booking.id])
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['effective_status'] == 'cancelled'

        again = authenticated_client.post(url)
        assert again.status_code == status.HTTP_400_BAD_REQUEST

    def test_distribution(self, authenticated_client, platform_booking):
        url = reverse('bookings:booking-distribution', args=[platform_booking.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['net_profit']) == Decimal('560.00')
        assert Decimal(response.data['partner_share']) == Decimal('240.00')
        assert len(response.data['partner_shares']) == 2

    def test_payment_summary(self, authenticated_client, make_booking):
        booking = make_booking(payments=[{'amount': Decimal('500.00'), 'method': 'cash'}])
        url = reverse('bookings:booking-payment-summary', args=[booking.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_fully_paid'] is True
        assert Decimal(response.data['remaining']) == Decimal('0.00')


@pytest.mark.django_db
class TestBookingDelete:
    """Tests for DELETE /api/bookings/{id}/"""

    def test_regular_user_cannot_delete(self, authenticated_client, booking):
        response = authenticated_client.delete(reverse('bookings:booking-detail', args=[booking.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Booking.objects.filter(id=booking.id).exists()

    def test_staff_deletes(self, staff_client, booking):
        response = staff_client.delete(reverse('bookings:booking-detail', args=[booking.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Booking.objects.exists()


@pytest.mark.django_db
class TestAvailability:
    """Tests for POST /api/bookings/check-availability/"""

    def test_available(self, authenticated_client, booking):
        payload = {'room': str(booking.room_id), 'check_in': '2025-03-06', 'check_out': '2025-03-10'}
        response = authenticated_client.post(reverse('bookings:check-availability'), payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['available'] is True
        assert response.data['conflicts'] == []

    def test_unavailable(self, authenticated_client, booking):
        payload = {'room': str(booking.room_id), 'check_in': '2025-03-05', 'check_out': '2025-03-10'}
        response = authenticated_client.post(reverse('bookings:check-availability'), payload, format='json')

        assert response.data['available'] is False
        assert response.data['conflicts'][0]['id'] == str(booking.id)

    def test_excluding_own_booking(self, authenticated_client, booking):
        payload = {
            'room': str(booking.room_id),
            'check_in': '2025-03-01',
            'check_out': '2025-03-06',
            'exclude_booking': str(booking.id),
        }
        response = authenticated_client.post(reverse('bookings:check-availability'), payload, format='json')
        assert response.data['available'] is True


@pytest.mark.django_db
class TestTransferOrigin:
    """Tests for GET /api/bookings/transfer-origin/"""

    def test_match(self, authenticated_client, make_booking, other_room):
        today = timezone.localdate()
        origin = make_booking(
            room=other_room,
            guest_name='Ahmed Ali',
            check_in=today - timedelta(days=2),
            check_out=today + timedelta(days=3),
            source='Airbnb',
            platform_commission=Decimal('12.50'),
        )

        response = authenticated_client.get(
            reverse('bookings:transfer-origin'),
            {'origin_room': str(other_room.id), 'guest_name': 'AHMED ali'},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(origin.id)
        assert response.data['platform_commission'] == '12.50'
        assert response.data['source'] == 'Airbnb'

    def test_no_match(self, authenticated_client, other_room):
        response = authenticated_client.get(
            reverse('bookings:transfer-origin'),
            {'origin_room': str(other_room.id), 'guest_name': 'Nobody'},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
