import json

import pytest
from django.core.management import call_command
from django.urls import reverse
from rest_framework.test import APIClient

from screening.models import HealthCenter, Patient, TestAction, TestResult

pytestmark = pytest.mark.django_db


def register(client, **overrides):
    body = {'firstName': 'Marta', 'lastName': 'Ruiz', 'documentNumber': '12345678z', 'acceptTerms': True}
    body.update(overrides)
    return client.post(reverse('patient_register'), body, format='json')


def test_register_patient(center):
    client = APIClient()
    r = register(client, healthCenterId=center.id, phone='600000000')
    assert r.status_code == 201
    assert r.data['documentNumber'] == '12345678Z'
    assert r.data['healthCenterId'] == center.id

    patient = Patient.objects.get(id=r.data['id'])
    assert patient.accepted_terms_at is not None
    assert client.get(reverse('patient_detail', args=[patient.id])).data['firstName'] == 'Marta'


@pytest.mark.parametrize('overrides', [
    {'acceptTerms': False},
    {'acceptTerms': None},
    {'firstName': ''},
    {'firstName': '<b>A</b>'},
    {'documentNumber': '   '},
    {'email': 'not-an-email'},
    {'healthCenterId': 987654},
])
def test_register_rejects_invalid_form(overrides):
    r = register(APIClient(), **overrides)
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert Patient.objects.count() == 0


def test_register_strips_markup():
    r = register(APIClient(), firstName='<script>x</script>Maria')
    assert r.status_code == 201
    assert '<' not in r.data['firstName']


def test_register_rejects_duplicate_document():
    client = APIClient()
    assert register(client).status_code == 201
    assert register(client, documentNumber='12345678Z').status_code == 400


def test_patient_detail_missing():
    assert APIClient().get(reverse('patient_detail', args=[424242])).status_code == 404


def test_list_health_centers():
    HealthCenter.objects.create(name='B center')
    HealthCenter.objects.create(name='A center')
    r = APIClient().get(reverse('health_centers'))
    assert r.status_code == 200
    assert [c['name'] for c in r.data] == ['A center', 'B center']
    assert r.data[0]['opensAt'] == '09:00'


def test_record_and_list_test_results(make_patient):
    patient = make_patient()
    client = APIClient()
    r = client.post(reverse('test_results'), {
        'patientId': patient.id, 'action': TestAction.SCHEDULE_TEST_APPOINTMENT_AT_HOME, 'result': 'positive',
    }, format='json')
    assert r.status_code == 201
    assert r.data['created']

    client.post(reverse('test_results'), {'patientId': patient.id, 'action': 'CALL_PATIENT'}, format='json')
    r = client.get(reverse('test_results'), {'filter': json.dumps({'where': {'patientId': patient.id},
                                                                    'order': 'id DESC'})})
    assert [x['action'] for x in r.data] == ['CALL_PATIENT', TestAction.SCHEDULE_TEST_APPOINTMENT_AT_HOME]


def test_test_results_reject_include():
    r = APIClient().get(reverse('test_results'), {'filter': json.dumps({'include': [{'relation': 'healthCenter'}]})})
    assert r.status_code == 400


def test_test_result_blank_action_is_stored_as_null(make_patient):
    patient = make_patient()
    r = APIClient().post(reverse('test_results'), {'patientId': patient.id, 'action': ''}, format='json')
    assert r.status_code == 201
    assert TestResult.objects.get(id=r.data['id']).action is None


def test_healthz():
    r = APIClient().get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


def test_populate_data_command():
    call_command('populate_data', patients=5, seed=1)
    call_command('populate_data', patients=5, seed=1)
    assert HealthCenter.objects.count() == 3
    assert Patient.objects.count() == 5
