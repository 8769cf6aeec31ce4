import logging
import time

import click
from flask import current_app

from .exceptions import SnaphoodError, error_message
from .models.identity import Position

logger = logging.getLogger(__name__)


def register_cli(app):

    @app.cli.command("post-snap")
    @click.option("--description", required=True, help="Text shown with the snap.")
    @click.option("--lat", type=float, required=True, help="Latitude of the snap.")
    @click.option("--lng", type=float, required=True, help="Longitude of the snap.")
    @click.option("--front", is_flag=True, help="Use the front (user-facing) camera.")
    @click.option("--image", type=click.Path(exists=True, dir_okay=False), help="Post this file instead of capturing.")
    @click.option("--warmup", type=float, default=0.5, show_default=True, help="Seconds to let the camera settle.")
    def post_snap(description, lat, lng, front, image, warmup):
        """Capture a photo from the local camera and post it as a snap."""
        extension = current_app.extensions["snaphood"]
        map_session = extension["session"]
        extension["position_source"].report(Position(latitude=lat, longitude=lng))

        try:
            map_session.geolocation.locate()
            if image:
                with open(image, "rb") as f:
                    photo = f.read()
            else:
                capture = map_session.capture
                if front != capture.use_front_camera:
                    capture.flip()
                capture.open_camera()
                time.sleep(warmup)
                photo = capture.capture()

            snap_id = map_session.submit_snap(description, image=photo)
        except SnaphoodError as e:
            logger.error(f"post-snap failed: {e}")
            raise click.ClickException(error_message(e))
        finally:
            map_session.capture.close()

        click.echo(f"Posted snap {snap_id}")
