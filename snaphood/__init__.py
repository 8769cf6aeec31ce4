import atexit
from flask import Flask
from . import gcp_clients
from .gcp_clients import init_services
from .routes import main_bp
from .auth import auth_bp
from .cli import register_cli

def create_app(map_session=None, identity_provider=None, position_source=None):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = gcp_clients.FLASK_SECRET_KEY

    if map_session is None:
        # Initialize Global Services
        init_services()
        map_session, identity_provider, position_source = build_session()
        map_session.mount()
        atexit.register(map_session.close)

    app.extensions["snaphood"] = {
        "session": map_session,
        "identity_provider": identity_provider,
        "position_source": position_source
    }

    # Register Blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    register_cli(app)

    return app

def build_session():
    from .devices.camera import OpenCVCamera
    from .devices.geolocation import ReportedPositionSource
    from .map_session import MapSession
    from .presenters.clustering import MapIcons
    from .services.geocoding_service import GeocodingService
    from .services.identity_service import SlackIdentityProvider
    from .services.snap_service import SnapService
    from .services.storage_service import StorageService

    identity_provider = SlackIdentityProvider()
    position_source = ReportedPositionSource()
    map_session = MapSession(
        snap_service=SnapService(),
        storage_service=StorageService(),
        geocoding_service=GeocodingService(),
        identity_provider=identity_provider,
        camera=OpenCVCamera(),
        position_source=position_source,
        icons=MapIcons.default()
    )
    return map_session, identity_provider, position_source
