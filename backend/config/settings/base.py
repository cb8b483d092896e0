"""
Base settings for Social Dashboard project.
"""
from pathlib import Path
from decouple import config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config('SECRET_KEY', default='django-insecure-change-this-in-production')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config('DEBUG', default=True, cast=bool)

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=lambda v: [s.strip() for s in v.split(',')])

# Application definition
INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.staticfiles',

    # Third party apps
    'corsheaders',

    # Local apps
    'apps.auth',
    'apps.backend_api',
    'apps.accounts',
    'apps.posts',
    'apps.media',
    'apps.platforms',  # Per-platform publishers
    'apps.planner',
    'apps.library',
    'apps.gmb',
    'apps.notifications',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'api.middleware.RequestLoggingMiddleware',
]

ROOT_URLCONF = 'config.urls'

WSGI_APPLICATION = 'config.wsgi.application'

# The dashboard keeps no records of its own; everything lives behind the backend API.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = config('TIME_ZONE', default='UTC')
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Redis Configuration
REDIS_URL = config('REDIS_URL', default='')

if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': REDIS_URL,
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            }
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'social-dashboard',
        }
    }

# Backend REST API
BACKEND_API_URL = config('BACKEND_API_URL', default='http://localhost:3000/api/v1').rstrip('/')
BACKEND_TIMEOUT = config('BACKEND_TIMEOUT', default=60, cast=int)

# Supabase (session tokens + object storage)
SUPABASE_URL = config('SUPABASE_URL', default='')
SUPABASE_SERVICE_ROLE_KEY = config('SUPABASE_SERVICE_ROLE_KEY', default='')
SUPABASE_JWT_SECRET = config('SUPABASE_JWT_SECRET', default='')
SUPABASE_JWT_AUDIENCE = config('SUPABASE_JWT_AUDIENCE', default='authenticated')
JWT_ALGORITHM = config('JWT_ALGORITHM', default='HS256')

# Storage buckets per platform
STORAGE_BUCKETS = {
    'facebook': 'Facebook',
    'instagram': 'Instagram',
    'gmb': 'Google',
}
SIGNED_URL_EXPIRES_IN = config('SIGNED_URL_EXPIRES_IN', default=3600, cast=int)
RECENT_UPLOADS_PAGE_SIZE = 20

# Upload ceilings (bytes)
MAX_STORAGE_UPLOAD_SIZE = config('MAX_STORAGE_UPLOAD_SIZE', default=52428800, cast=int)  # 50MB storage tier
PLATFORM_MEDIA_LIMITS = {
    'facebook': {
        'image': config('FACEBOOK_MAX_IMAGE_SIZE', default=4194304, cast=int),  # 4MB
        'video': None,
    },
    'instagram': {
        'image': config('INSTAGRAM_MAX_IMAGE_SIZE', default=8388608, cast=int),  # 8MB
        'video': config('INSTAGRAM_MAX_VIDEO_SIZE', default=104857600, cast=int),  # 100MB
    },
}
MAX_CAROUSEL_ITEMS = 10

# Alerts polling interval (seconds)
ALERTS_POLL_INTERVAL = config('ALERTS_POLL_INTERVAL', default=30, cast=int)

# CORS Configuration
CORS_ALLOWED_ORIGINS = config(
    'CORS_ALLOWED_ORIGINS',
    default='http://localhost:3000,http://127.0.0.1:3000',
    cast=lambda v: [s.strip() for s in v.split(',')]
)
CORS_ALLOW_CREDENTIALS = True

# Logging Configuration
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{levelname}] {asctime} | {name} | {module}.{funcName}:{lineno} | {message}',
            'style': '{',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
        'simple': {
            'format': '[{levelname}] {asctime} | {message}',
            'style': '{',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
            'stream': 'ext://sys.stdout',
        },
        'file': {
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'django.log',
            'formatter': 'verbose',
            'encoding': 'utf-8',
        },
        'error_file': {
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'error.log',
            'formatter': 'verbose',
            'encoding': 'utf-8',
            'level': 'ERROR',
        },
        'api_file': {
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'api.log',
            'formatter': 'verbose',
            'encoding': 'utf-8',
        },
        'platforms_file': {
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'platforms.log',
            'formatter': 'verbose',
            'encoding': 'utf-8',
        },
        'media_file': {
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'media.log',
            'formatter': 'verbose',
            'encoding': 'utf-8',
        },
        'auth_file': {
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'auth.log',
            'formatter': 'simple',
            'encoding': 'utf-8',
        },
    },
    'root': {
        'handlers': ['console', 'file', 'error_file'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': False,
        },
        'django.request': {
            'handlers': ['console', 'api_file', 'error_file'],
            'level': 'WARNING',
            'propagate': False,
        },
        'auth': {
            'handlers': ['auth_file', 'console'],
            'level': 'INFO',
            'propagate': False,
        },
        'api': {
            'handlers': ['api_file', 'console'],
            'level': 'INFO',
            'propagate': False,
        },
        'platforms': {
            'handlers': ['platforms_file', 'console'],
            'level': 'INFO',
            'propagate': False,
        },
        'media': {
            'handlers': ['media_file', 'console'],
            'level': 'INFO',
            'propagate': False,
        },
        'planner': {
            'handlers': ['file', 'console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

# Create logs directory if not exists
(BASE_DIR / 'logs').mkdir(exist_ok=True)
