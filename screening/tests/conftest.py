import datetime

import pytest
from django.core.cache import cache

from screening.models import HealthCenter, Patient


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    # throttling state lives in the cache and would leak between tests
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def center(db):
    return HealthCenter.objects.create(name='Centro Norte', daily_capacity=2, opens_at=datetime.time(9, 0))


@pytest.fixture
def make_patient(db):
    counter = {'n': 0}

    def make(**kwargs):
        counter['n'] += 1
        kwargs.setdefault('first_name', 'Ana')
        kwargs.setdefault('document_number', f'DOC{counter["n"]:04d}')
        return Patient.objects.create(**kwargs)
    return make
