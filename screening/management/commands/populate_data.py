"""
Management command to populate the database with demo data.
"""
from datetime import time, timedelta
import random

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from screening.models import HealthCenter, Patient, TestAction, TestResult


class Command(BaseCommand):
    help = 'Populate database with demo health centers, patients and test results'

    def add_arguments(self, parser):
        parser.add_argument('--patients', type=int, default=20, help='number of patients to create')
        parser.add_argument('--seed', type=int, default=None, help='random seed for reproducible data')

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        self.stdout.write('Creating demo data...')

        centers = self.create_health_centers()
        patients = self.create_patients(centers, options['patients'], rng)
        results = self.create_test_results(patients, rng)

        self.stdout.write(self.style.SUCCESS(
            f'Created {len(centers)} health centers, {len(patients)} patients and {len(results)} test results.'
        ))

    def create_health_centers(self):
        centers_data = [
            {'name': 'Centro de Salud Centro', 'address': 'Calle Mayor 1', 'daily_capacity': 40, 'opens_at': time(8, 30)},
            {'name': 'Centro de Salud Norte', 'address': 'Avenida Norte 25', 'daily_capacity': 30, 'opens_at': time(9, 0)},
            {'name': 'Centro de Salud Sur', 'address': 'Plaza del Sur 3', 'daily_capacity': 20, 'opens_at': time(9, 0)},
        ]
        centers = []
        for data in centers_data:
            center, _ = HealthCenter.objects.get_or_create(name=data['name'], defaults=data)
            centers.append(center)
        return centers

    def create_patients(self, centers, count, rng):
        first_names = ['Lucía', 'Hugo', 'Martina', 'Daniel', 'Sofía', 'Pablo', 'Julia', 'Álvaro']
        last_names = ['García', 'Fernández', 'López', 'Martínez', 'Sánchez', 'Pérez', 'Gómez']
        patients = []
        for i in range(count):
            document_number = f'DEMO{i:05d}'
            patient, _ = Patient.objects.get_or_create(
                document_number=document_number,
                defaults={
                    'first_name': rng.choice(first_names),
                    'last_name': rng.choice(last_names),
                    'phone': f'6{rng.randint(10000000, 99999999)}',
                    # some patients have no assigned center yet
                    'health_center': rng.choice(centers + [None]),
                    'accepted_terms_at': timezone.now(),
                },
            )
            patients.append(patient)
        return patients

    def create_test_results(self, patients, rng):
        actions = [
            TestAction.SCHEDULE_TEST_APPOINTMENT_AT_HEALTH_CENTER,
            TestAction.SCHEDULE_TEST_APPOINTMENT_AT_HOME,
            None,
        ]
        now = timezone.now()
        results = []
        for patient in patients:
            for _ in range(rng.randint(0, 3)):
                results.append(TestResult.objects.create(
                    patient=patient,
                    action=rng.choice(actions),
                    result=rng.choice(['negative', 'positive', 'inconclusive']),
                    created=now - timedelta(days=rng.randint(0, 14), minutes=rng.randint(0, 600)),
                ))
        return results
