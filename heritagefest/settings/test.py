import tempfile
from pathlib import Path

from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

ALLOWED_HOSTS = ['testserver']

PAYMENT_GATEWAY = 'instamojo'
INSTAMOJO_API_KEY = 'test-api-key'
INSTAMOJO_AUTH_TOKEN = 'test-auth-token'
INSTAMOJO_BASE_URL = 'https://test.instamojo.com/api/1.1/'
RAZORPAY_KEY_ID = 'rzp_test_key'
RAZORPAY_KEY_SECRET = 'rzp_test_secret'
RAZORPAY_BASE_URL = 'https://api.razorpay.com/v1/'

PAYMENT_REDIRECT_URL = 'http://testserver/payment-success'

REGISTRATIONS_DIR = Path(tempfile.mkdtemp(prefix='heritagefest-test-'))
