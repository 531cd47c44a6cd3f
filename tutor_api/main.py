import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from tutor_api.auth.passwords import PasswordHasher
from tutor_api.core.config import Settings, validate_runtime_config
from tutor_api.core.errors import register_exception_handlers
from tutor_api.core.logging_config import setup_logging
from tutor_api.database import build_engine, build_session_factory, init_schema
from tutor_api.routes import auth_routes, course_routes, tutor_routes

SERVICE_NAME = 'Tutor Marketplace API'
SERVICE_VERSION = '0.1.0'

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    validate_runtime_config(settings)

    engine = build_engine(settings.database_url, echo=settings.database_echo)

    app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)

    @app.on_event('startup')
    def initialize_database() -> None:
        try:
            init_schema(engine)
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL and Postgres credentials.')

    @app.on_event('shutdown')
    def dispose_engine() -> None:
        engine.dispose()

    @app.get('/')
    def root():
        return {'status': f'{SERVICE_NAME} Running'}

    @app.get('/health')
    def health():
        return {
            'status': 'healthy',
            'service': SERVICE_NAME,
            'version': SERVICE_VERSION,
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(auth_routes.router, prefix='/auth')
    app.include_router(tutor_routes.router, prefix='/tutors')
    app.include_router(course_routes.router, prefix='/courses')

    logger.info('Configured %s (%s environment)', SERVICE_NAME, settings.app_env)
    return app


app = create_app()
