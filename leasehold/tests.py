# ===== PROJECT URL TEST SUITE =====
"""
Tests for the project-level endpoints: health check, API index, JWT tokens and the
JSON error handlers.
"""

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase

from rest_framework.test import APITestCase


class HealthCheckTest(TestCase):
    """Test /api/v1/health/"""

    def test_healthy(self):
        response = self.client.get('/api/v1/health/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'healthy')
        self.assertEqual(response.json()['database'], 'connected')

    @patch('leasehold.urls.connection')
    def test_database_down(self, mock_connection):
        mock_connection.cursor.side_effect = DatabaseError('connection refused')

        response = self.client.get('/api/v1/health/')

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['status'], 'unhealthy')

    def test_post_not_allowed(self):
        response = self.client.post('/api/v1/health/')
        self.assertEqual(response.status_code, 405)


class ApiInfoTest(TestCase):
    """Test the API index"""

    def test_info(self):
        response = self.client.get('/api/v1/info/')

        self.assertEqual(response.status_code, 200)
        endpoints = response.json()['endpoints']
        self.assertEqual(endpoints['applications']['status'], '/api/v1/applications/{id}/status/')

    def test_root_serves_index(self):
        response = self.client.get('/api/v1/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['api_name'], 'Leasehold API')


class NotFoundHandlerTest(TestCase):
    """Unknown API paths answer with JSON"""

    def test_unknown_api_path(self):
        response = self.client.get('/api/v1/nothing-here/')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'not_found')


class TokenAuthTest(APITestCase):
    """Test the JWT token endpoints"""

    def setUp(self):
        get_user_model().objects.create_user(username='ops', password='s3cret-pass')

    def test_obtain_refresh_and_verify(self):
        response = self.client.post('/api/v1/auth/token/', {
            'username': 'ops', 'password': 's3cret-pass'
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

        verify = self.client.post('/api/v1/auth/token/verify/', {
            'token': response.data['access']
        }, format='json')
        self.assertEqual(verify.status_code, 200)

        refresh = self.client.post('/api/v1/auth/token/refresh/', {
            'refresh': response.data['refresh']
        }, format='json')
        self.assertEqual(refresh.status_code, 200)
        self.assertIn('access', refresh.data)

    def test_bad_credentials(self):
        response = self.client.post('/api/v1/auth/token/', {
            'username': 'ops', 'password': 'wrong'
        }, format='json')

        self.assertEqual(response.status_code, 401)

    def test_verify_rejects_garbage(self):
        response = self.client.post('/api/v1/auth/token/verify/', {'token': 'not-a-token'}, format='json')

        self.assertEqual(response.status_code, 401)
