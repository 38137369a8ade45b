"""
Django settings for docvault project.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-docvault-dev-key')

DEBUG = os.environ.get('DJANGO_DEBUG', 'True').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = [h.strip() for h in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h.strip()]


INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'core',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'docvault.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'docvault.wsgi.application'
ASGI_APPLICATION = 'docvault.asgi.application'


# Database
DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': os.environ.get('DB_NAME', str(BASE_DIR / 'db.sqlite3')),
        'USER': os.environ.get('DB_USER', ''),
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),
        'HOST': os.environ.get('DB_HOST', ''),
        'PORT': os.environ.get('DB_PORT', ''),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Status messages travel in a signed cookie: scoped to one visitor, shown once
MESSAGE_STORAGE = 'django.contrib.messages.storage.cookie.CookieStorage'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'


# Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'core': {
            'handlers': ['console'],
            'level': os.environ.get('DOCVAULT_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'layouts': {
            'handlers': ['console'],
            'level': os.environ.get('DOCVAULT_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}


# Document generation
DOCVAULT_RENDER_TIMEOUT = float(os.environ.get('DOCVAULT_RENDER_TIMEOUT', '30'))
DOCVAULT_STORE_TIMEOUT = float(os.environ.get('DOCVAULT_STORE_TIMEOUT', '10'))

# Recompute invoice totals server-side and reject submissions that disagree
DOCVAULT_STRICT_TOTALS = os.environ.get('DOCVAULT_STRICT_TOTALS', 'False').lower() in ('1', 'true', 'yes')

DOCVAULT_AUTHOR = os.environ.get('DOCVAULT_AUTHOR', 'docvault')
DOCVAULT_COMPANY_NAME = os.environ.get('DOCVAULT_COMPANY_NAME', 'Your Company')
DOCVAULT_DEFAULT_QR_URL = 'https://example.com'
DOCVAULT_LOGO_PATH = Path(os.environ.get('DOCVAULT_LOGO_PATH', str(BASE_DIR / 'static' / 'images' / 'logo.png')))

_FONTS_DIR = Path(os.environ.get('DOCVAULT_FONTS_DIR', str(BASE_DIR / 'fonts')))
DOCVAULT_FONTS = {
    'normal': _FONTS_DIR / 'Roboto-Regular.ttf',
    'bold': _FONTS_DIR / 'Roboto-Medium.ttf',
    'italic': _FONTS_DIR / 'Roboto-Italic.ttf',
    'bolditalic': _FONTS_DIR / 'Roboto-MediumItalic.ttf',
}
