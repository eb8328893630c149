import logging

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from auth import extract_credentials
from config import load_settings
from errors import APIError, handle_errors, raise_for_failure
from service import get_service

settings = load_settings()

app = Flask(__name__)

# Logging setup
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)

CORS(app, origins=settings.allowed_origins)


def _image_response(content: bytes, status: int = 200, mimetype: str = "image/png") -> Response:
    return Response(content, status=status, mimetype=mimetype)


@app.route("/devices", methods=["GET"])
@handle_errors
def list_devices():
    return jsonify(get_service().list_devices())


@app.route("/devices/add", methods=["POST"])
@handle_errors
def register_device():
    service = get_service()
    registered = raise_for_failure(
        service.register_device(
            name=request.values.get("name"),
            description=request.values.get("description"),
            serial_number=request.values.get("serialNumber"),
            manufacturer=request.values.get("manufacturer"),
        )
    )
    response = _image_response(registered.code, status=201, mimetype=service.code_options.media_type)
    response.headers["X-Device-Id"] = str(registered.device.id)
    return response


@app.route("/devices/<device_id>", methods=["GET"])
@handle_errors
def get_device(device_id):
    device = raise_for_failure(get_service().get_device(device_id))
    return jsonify(device.to_dict())


@app.route("/devices/<device_id>", methods=["PUT"])
@handle_errors
def update_device(device_id):
    device = raise_for_failure(
        get_service().update_device(
            device_id,
            name=request.values.get("name"),
            description=request.values.get("description"),
            serial_number=request.values.get("serialNumber"),
            manufacturer=request.values.get("manufacturer"),
        )
    )
    return jsonify(device.to_dict())


@app.route("/devices/<device_id>", methods=["DELETE"])
@handle_errors
def delete_device(device_id):
    raise_for_failure(get_service().delete_device(device_id))
    return jsonify({"status": "deleted"})


@app.route("/users/register", methods=["POST"])
@handle_errors
def register_user():
    raise_for_failure(get_service().register_user(request.form.get("login"), request.form.get("password")))
    return jsonify({"status": "created"}), 201


@app.route("/users/<login>/takenDevices", methods=["GET"])
@handle_errors
def taken_devices(login):
    return jsonify([device.to_dict() for device in get_service().taken_devices(login)])


@app.route("/uploadImage/<device_id>", methods=["POST"])
@handle_errors
def upload_image(device_id):
    upload = request.files.get("image")
    if upload is None:
        raise APIError("No files were uploaded.", 400)
    raise_for_failure(get_service().attach_image(device_id, upload.read(), upload.mimetype))
    return jsonify({"status": "uploaded"})


@app.route("/viewImage/<device_id>", methods=["GET"])
@handle_errors
def view_image(device_id):
    return _image_response(raise_for_failure(get_service().view_image(device_id)))


@app.route("/takeDevice/<device_id>", methods=["POST"])
@handle_errors
def take_device(device_id):
    login, password = extract_credentials(request)
    device = raise_for_failure(get_service().take_device(device_id, login, password))
    return jsonify(device.to_dict())


@app.route("/releaseDevice/<device_id>", methods=["POST"])
@handle_errors
def release_device(device_id):
    login, password = extract_credentials(request)
    device = raise_for_failure(get_service().release_device(device_id, login, password))
    return jsonify(device.to_dict())


@app.route("/qrcode", methods=["GET"])
@handle_errors
def last_registered_code():
    return _image_response(raise_for_failure(get_service().render_last_registered_code()))


@app.route("/qrcode/<identifier>", methods=["GET"])
@handle_errors
def device_code(identifier):
    return _image_response(get_service().render_code(identifier))


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=settings.port)
