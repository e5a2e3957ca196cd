from flask import jsonify


def json_response(message="success", data=None, code=200, errors=None):
    body = {"success": 200 <= code < 300, "message": message}
    if data is not None:
        body["data"] = data
    if errors:
        body["errors"] = errors
    resp = jsonify(body)
    resp.status_code = code
    return resp
