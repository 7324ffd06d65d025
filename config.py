import os

basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key')

    uri = os.environ.get('DATABASE_URL')

    if uri and uri.startswith('postgresql://'):
        uri = uri.replace('postgresql://', 'postgresql+psycopg://', 1)

    SQLALCHEMY_DATABASE_URI = uri or f"sqlite:///{os.path.join(basedir, 'instance', 'production.db')}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JSON API only, forms are filled from request bodies
    WTF_CSRF_ENABLED = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    WORKERS_CACHE_TTL = int(os.environ.get('WORKERS_CACHE_TTL', 3600))
    ORDERS_PAGE_LIMIT_MAX = 100
    ORDER_NUMBER_ATTEMPTS = 3
    # movements of products without a linked material are booked here
    DEFAULT_MATERIAL_ID = 1
    REPORT_TITLE = os.environ.get('REPORT_TITLE', 'Roselover Hijab')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_LEVEL = 'DEBUG'
