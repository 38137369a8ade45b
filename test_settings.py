from docvault.settings import *

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

DOCVAULT_RENDER_TIMEOUT = 15
DOCVAULT_STORE_TIMEOUT = 5
