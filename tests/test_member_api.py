"""
Tests for the member dashboard API.

- GET /api/member/dashboard
- POST /api/member/events/<id>/register
- POST /api/member/activity
"""
from datetime import datetime, timedelta
from decimal import Decimal

from app.extensions import db
from app.models import Event, EventRegistration, Membership, NewsArticle, UserActivity


def make_event(title='Rally', days_ahead=7, **kwargs):
    start = datetime.utcnow() + timedelta(days=days_ahead)
    event = Event(
        title=title,
        description='Party event',
        location='Maputo',
        start_date=start,
        end_date=start + timedelta(hours=3),
        **kwargs
    )
    db.session.add(event)
    db.session.commit()
    return event


class TestDashboard:

    def test_requires_token(self, client):
        response = client.get('/api/member/dashboard')
        assert response.status_code == 401

    def test_empty_dashboard(self, client, sample_member, member_headers):
        response = client.get('/api/member/dashboard', headers=member_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['profile']['member_id'] == sample_member.member_id
        assert data['membership'] is None
        assert data['stats'] == {'eventsAttended': 0, 'totalEvents': 0, 'totalNews': 0}
        assert data['upcomingEvents'] == []
        assert data['recentNews'] == []
        assert data['eventRegistrations'] == []
        assert data['userActivities'] == []

    def test_dashboard_contents(self, client, sample_member, member_headers):
        db.session.add(Membership(user_id=sample_member.id, membership_type='Standard Membership',
                                  amount=Decimal('100'), currency='MZN',
                                  payment_status='completed', stripe_session_id='cs_dash'))
        for i in range(7):
            db.session.add(NewsArticle(title=f'News {i}', content='c',
                                       created_at=datetime.utcnow() - timedelta(hours=i)))
        past = make_event('Past', days_ahead=-2)
        soon = make_event('Soon', days_ahead=1)
        make_event('Later', days_ahead=10)
        db.session.add(EventRegistration(user_id=sample_member.id, event_id=past.id))
        db.session.add(EventRegistration(user_id=sample_member.id, event_id=soon.id))
        db.session.commit()

        response = client.get('/api/member/dashboard', headers=member_headers)

        data = response.get_json()
        assert data['membership']['stripe_session_id'] == 'cs_dash'
        assert [e['title'] for e in data['upcomingEvents']] == ['Soon', 'Later']
        assert len(data['recentNews']) == 5
        assert data['recentNews'][0]['title'] == 'News 0'
        assert data['stats'] == {'eventsAttended': 2, 'totalEvents': 2, 'totalNews': 5}
        assert len(data['eventRegistrations']) == 2

    def test_dashboard_without_profile(self, client, identity_store):
        account = identity_store.sign_up('orphan@example.com', 'secret123')
        token = identity_store.issue_token(account.id)

        response = client.get('/api/member/dashboard', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to fetch user profile'}


class TestEventRegistration:

    def test_register_for_event(self, client, sample_member, member_headers):
        event = make_event()

        response = client.post(f'/api/member/events/{event.id}/register', headers=member_headers)

        assert response.status_code == 201
        registration = response.get_json()['registration']
        assert registration['event_id'] == event.id
        assert registration['user_id'] == sample_member.id
        assert registration['status'] == 'registered'

        activity = UserActivity.query.filter_by(user_id=sample_member.id).one()
        assert activity.activity_type == 'event_registration'
        assert activity.details['event_id'] == event.id

    def test_repeat_registration_is_recorded(self, client, member_headers):
        event = make_event()

        client.post(f'/api/member/events/{event.id}/register', headers=member_headers)
        response = client.post(f'/api/member/events/{event.id}/register', headers=member_headers)

        assert response.status_code == 201
        assert EventRegistration.query.filter_by(event_id=event.id).count() == 2

    def test_unknown_event(self, client, member_headers):
        response = client.post('/api/member/events/9999/register', headers=member_headers)
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Event with ID 9999 not found'}

    def test_cancelled_event(self, client, member_headers):
        event = make_event(status='cancelled')
        response = client.post(f'/api/member/events/{event.id}/register', headers=member_headers)
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Event has been cancelled'}

    def test_deadline_passed(self, client, member_headers):
        event = make_event(registration_deadline=datetime.utcnow() - timedelta(days=1))
        response = client.post(f'/api/member/events/{event.id}/register', headers=member_headers)
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Registration deadline has passed'}

    def test_full_event(self, client, make_member, headers_for):
        event = make_event(max_participants=1)
        first = make_member(email='first@example.com')
        second = make_member(email='second@example.com')

        assert client.post(f'/api/member/events/{event.id}/register',
                           headers=headers_for(first)).status_code == 201
        response = client.post(f'/api/member/events/{event.id}/register', headers=headers_for(second))

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Event is full'}


class TestActivity:

    def test_log_activity(self, client, sample_member, member_headers):
        response = client.post('/api/member/activity', json={
            'activityType': 'profile_viewed',
            'details': {'section': 'membership_card'}
        }, headers=member_headers)

        assert response.status_code == 201
        activity = response.get_json()['activity']
        assert activity['activity_type'] == 'profile_viewed'
        assert activity['details'] == {'section': 'membership_card'}
        assert activity['user_id'] == sample_member.id

    def test_activity_type_required(self, client, member_headers):
        response = client.post('/api/member/activity', json={}, headers=member_headers)
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Missing required fields: activityType'}

    def test_activities_show_on_dashboard(self, client, member_headers):
        for activity_type in ('first', 'second'):
            client.post('/api/member/activity', json={'activityType': activity_type},
                        headers=member_headers)

        data = client.get('/api/member/dashboard', headers=member_headers).get_json()

        assert len(data['userActivities']) == 2
